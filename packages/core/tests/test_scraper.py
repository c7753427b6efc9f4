"""Tests for commit scraping from build logs."""

from buildnotify_core.scraper import COMMIT_LINE_RE, CommitRef, scrape_commit

SHA = "0123456789abcdef0123456789abcdef01234567"
SHA2 = "f" * 40


def _line(sha=SHA, ref="origin/main"):
    return f"Commencing build of Revision {sha} ({ref})"


class TestScrapeCommit:
    def test_returns_none_for_empty_log(self):
        assert scrape_commit([]) is None

    def test_returns_none_when_no_line_matches(self):
        assert scrape_commit(["Building in workspace /tmp/ws", "Finished: SUCCESS"]) is None

    def test_extracts_commit_and_branch(self):
        commit = scrape_commit(["Checking out", _line(), "make all"])
        assert commit == CommitRef(commit_id=SHA, branch="main")

    def test_first_match_wins(self):
        commit = scrape_commit([_line(SHA, "origin/first"), _line(SHA2, "origin/second")])
        assert commit.commit_id == SHA
        assert commit.branch == "first"

    def test_branch_keeps_slashes_after_remote(self):
        commit = scrape_commit([_line(ref="origin/feature/login-form")])
        assert commit.branch == "feature/login-form"

    def test_short_id_is_first_six_characters(self):
        commit = scrape_commit([_line()])
        assert commit.short_id == "012345"

    def test_rejects_short_hash(self):
        assert scrape_commit([_line(sha="a" * 39)]) is None

    def test_rejects_long_hash(self):
        assert scrape_commit([_line(sha="a" * 41)]) is None

    def test_rejects_ref_without_remote(self):
        assert scrape_commit([_line(ref="main")]) is None

    def test_line_must_be_anchored(self):
        assert scrape_commit(["[pipeline] " + _line()]) is None
        assert scrape_commit([_line() + " extra"]) is None

    def test_pattern_is_precompiled(self):
        assert COMMIT_LINE_RE.pattern.startswith("^Commencing build of Revision")

    def test_rejects_non_ascii_word_characters(self):
        assert scrape_commit([_line(sha="é" * 40)]) is None
