"""Tests for MessageBuilder fragments."""

import logging
from unittest.mock import MagicMock

import pytest

from buildnotify_core.build import AffectedFile, BuildView, ChangeEntry, Result, SnapshotBuild
from buildnotify_core.message import MessageBuilder, NoBuildError, status_message

BASE = "https://github.com/acme/app/"
SHA = "0123456789abcdef0123456789abcdef01234567"
CONFIG = {"jenkins_url": "http://ci/", "repo_base_url": BASE}


def make_build(result=Result.SUCCESS, changes=None, log=None, **kwargs):
    return SnapshotBuild(
        project_name="myapp",
        url="j/1/",
        result=result,
        duration_string="3.2 sec",
        change_set=changes,
        log_lines=log,
        **kwargs,
    )


def entry(author, message, *paths):
    return ChangeEntry(author=author, message=message, affected_files=frozenset(AffectedFile(p) for p in paths))


class TestConstruct:
    def test_missing_build_raises(self):
        with pytest.raises(NoBuildError):
            MessageBuilder(CONFIG, None)

    def test_prefix_without_commit_link(self):
        assert MessageBuilder(CONFIG, make_build()).render() == "myapp - "

    def test_prefix_with_commit_link(self):
        build = make_build(log=["noise", f"Commencing build of Revision {SHA} (origin/main)"])
        assert MessageBuilder(CONFIG, build).render() == (
            f"myapp - <a href='{BASE}compare/main'>main</a>/<a href='{BASE}commit/{SHA}'>012345</a> "
        )

    def test_str_matches_render(self):
        message = MessageBuilder(CONFIG, make_build()).append("x")
        assert str(message) == message.render()


class TestStatusMessage:
    @pytest.mark.parametrize(
        "result, expected",
        [
            (Result.SUCCESS, "Success"),
            (Result.FAILURE, "<b>FAILURE</b>"),
            (Result.ABORTED, "ABORTED"),
            (Result.NOT_BUILT, "Not built"),
            (Result.UNSTABLE, "Unstable"),
            (Result.UNKNOWN, "Unknown"),
            (Result.IN_PROGRESS, "Starting..."),
        ],
    )
    def test_status_tokens(self, result, expected):
        assert status_message(make_build(result=result)) == expected

    def test_building_wins_over_result(self):
        build = MagicMock(spec=BuildView)
        build.is_building = True
        build.result = Result.FAILURE
        assert status_message(build) == "Starting..."

    def test_append_status_message_chains(self):
        body = MessageBuilder(CONFIG, make_build(result=Result.FAILURE)).append_status_message().render()
        assert body == "myapp - <b>FAILURE</b>"


class TestCommitInfo:
    def test_uses_last_entry(self):
        build = make_build(changes=[entry("ana", "fix"), entry("bob", "ship")])
        assert MessageBuilder(CONFIG, build).append_commit_info().render() == "myapp - bob: ship"

    def test_empty_change_set_appends_nothing(self):
        assert MessageBuilder(CONFIG, make_build()).append_commit_info().render() == "myapp - "

    def test_message_is_not_escaped_again(self):
        build = make_build(changes=[entry("ana", "a &amp; b")])
        assert MessageBuilder(CONFIG, build).append_commit_info().render().endswith("ana: a &amp; b")


class TestDurationAndOpenLink:
    def test_duration(self):
        assert MessageBuilder(CONFIG, make_build()).append_duration().render() == "myapp -  after 3.2 sec"

    def test_open_link_joins_base_and_build_url(self):
        body = MessageBuilder(CONFIG, make_build()).append_open_link().render()
        assert body == "myapp -  (<a href='http://ci/j/1/console'>Console</a>)"

    def test_open_link_without_jenkins_url(self):
        body = MessageBuilder({}, make_build()).append_open_link().render()
        assert body.endswith("(<a href='j/1/console'>Console</a>)")

    def test_append_accepts_non_strings(self):
        assert MessageBuilder(CONFIG, make_build()).append(3).render() == "myapp - 3"


class TestCommitLink:
    def test_log_failure_is_swallowed(self, tmp_path, caplog):
        build = make_build(log_path=tmp_path / "missing.log")
        with caplog.at_level(logging.INFO, logger="buildnotify_core.message"):
            body = MessageBuilder(CONFIG, build).append_status_message().render()
        assert body == "myapp - Success"
        assert "Could not read logs" in caplog.text

    def test_reads_at_most_one_hundred_lines(self):
        build = MagicMock(spec=BuildView)
        build.project_name = "myapp"
        build.recent_log.return_value = []
        MessageBuilder(CONFIG, build)
        build.recent_log.assert_called_once_with(100)

    def test_no_repo_base_url_skips_log_read(self):
        build = MagicMock(spec=BuildView)
        build.project_name = "myapp"
        MessageBuilder({"jenkins_url": "http://ci/"}, build)
        build.recent_log.assert_not_called()

    def test_link_targets_use_full_id_and_branch(self):
        build = make_build(log=[f"Commencing build of Revision {SHA} (upstream/release/2.0)"])
        body = MessageBuilder(CONFIG, build).render()
        assert f"href='{BASE}commit/{SHA}'" in body
        assert f"href='{BASE}compare/release/2.0'" in body
        assert ">012345</a>" in body

    def test_append_commit_link_is_chainable(self):
        message = MessageBuilder(CONFIG, make_build())
        assert message.append_commit_link() is message
