"""Tests for the ReleaseIndex domain object and its rendering."""

import logging

import pytest
from packaging.version import InvalidVersion

from releaser.domain.archive import ArchiveRecord, parse_archive
from releaser.domain.release_index import ReleaseIndex


def _records(*paths):
    return [parse_archive(p) for p in paths]


@pytest.fixture
def sample_index():
    return ReleaseIndex.build(_records(
        "/d/22.04/python-3.10.4.tar.xz",
        "/d/20.04/python-3.9.13.tar.xz",
        "/d/22.04/python-3.9.13.tar.xz",
        "/d/22.04/python-3.10.12.tar.xz",
        "/d/18.04/python-3.6.15.tar.xz",
    ))


class TestBuild:
    """Tests for ReleaseIndex.build."""

    def test_empty(self):
        index = ReleaseIndex.build([])
        assert len(index) == 0
        assert index.to_dict() == {}

    def test_grouping(self):
        """Test two versions of one group land in one section."""
        index = ReleaseIndex.build(_records(
            "/d/22.04/python-3.10.4.tar.xz",
            "/d/22.04/python-3.11.1.tar.xz",
        ))
        assert index.to_dict() == {
            "22.04": {
                "3.10.4": "22.04/python-3.10.4.tar.xz",
                "3.11.1": "22.04/python-3.11.1.tar.xz",
            }
        }
        assert len(index) == 2

    def test_versions_lookup(self, sample_index):
        assert set(sample_index.versions("22.04")) == {"3.10.4", "3.9.13", "3.10.12"}
        assert dict(sample_index.versions("99.99")) == {}

    def test_contains(self, sample_index):
        assert parse_archive("/x/20.04/python-3.9.13.tar.xz") in sample_index
        assert parse_archive("/x/20.04/python-3.9.14.tar.xz") not in sample_index
        assert "20.04" not in sample_index

    def test_immutable(self, sample_index):
        """Test the index cannot be modified in place."""
        with pytest.raises(TypeError):
            sample_index.groups["24.04"] = {}
        with pytest.raises(TypeError):
            sample_index.groups["22.04"]["3.12.0"] = "x"

    def test_duplicate_last_write_wins(self, caplog):
        """Test a repeated (group, version) keeps the later name and warns."""
        records = [
            ArchiveRecord("22.04", "3.10.4", "22.04/python-3.10.4.tar.xz"),
            ArchiveRecord("22.04", "3.10.4", "22.04/pypy-3.10.4.tar.xz"),
        ]
        with caplog.at_level(logging.WARNING):
            index = ReleaseIndex.build(records)

        assert index.versions("22.04")["3.10.4"] == "22.04/pypy-3.10.4.tar.xz"
        assert len(index.duplicates) == 1
        dup = index.duplicates[0]
        assert dup.previous == "22.04/python-3.10.4.tar.xz"
        assert dup.replacement == "22.04/pypy-3.10.4.tar.xz"
        assert "Duplicate release 22.04/3.10.4" in caplog.text

    def test_duplicate_uses_injected_logger(self):
        log = logging.getLogger("test.release_index")
        records = [ArchiveRecord("1.0", "1.0.0", "1.0/a-1.0.0.tar.xz")] * 2
        with pytest.MonkeyPatch.context() as mp:
            calls = []
            mp.setattr(log, "warning", lambda msg: calls.append(msg))
            ReleaseIndex.build(records, log=log)
        assert len(calls) == 1


class TestRender:
    """Tests for ReleaseIndex.render."""

    def test_exact_document(self, sample_index):
        """Test the full document layout."""
        assert sample_index.render() == (
            "# python releases\n\n"
            "Prebuild python builds for ubuntu\n\n"
            "\n\n## ubuntu 18.04\n\n"
            "* [3.6.15](18.04/python-3.6.15.tar.xz)\n"
            "\n\n## ubuntu 20.04\n\n"
            "* [3.9.13](20.04/python-3.9.13.tar.xz)\n"
            "\n\n## ubuntu 22.04\n\n"
            "* [3.9.13](22.04/python-3.9.13.tar.xz)\n"
            "* [3.10.4](22.04/python-3.10.4.tar.xz)\n"
            "* [3.10.12](22.04/python-3.10.12.tar.xz)\n"
        )

    def test_empty_document(self):
        assert ReleaseIndex.build([]).render() == (
            "# python releases\n\nPrebuild python builds for ubuntu\n\n"
        )

    def test_deterministic(self, sample_index):
        """Test rendering twice gives identical text."""
        assert sample_index.render() == sample_index.render()

    def test_independent_of_scan_order(self, sample_index):
        """Test record order does not leak into the document."""
        reversed_index = ReleaseIndex.build(reversed(list(sample_index.records())))
        assert reversed_index.render() == sample_index.render()

    def test_numeric_group_order(self):
        """Test groups sort numerically, not lexically."""
        index = ReleaseIndex.build(_records(
            "/d/3.10/python-3.10.1.tar.xz",
            "/d/3.9/python-3.9.1.tar.xz",
        ))
        text = index.render()
        assert text.index("## ubuntu 3.9") < text.index("## ubuntu 3.10")

    def test_custom_wording(self, sample_index):
        text = sample_index.render(title="builds", intro="Prebuilt", section_heading="Series {group}")
        assert text.startswith("# builds\n\nPrebuilt\n\n")
        assert "## Series 22.04" in text

    def test_injected_ordering(self, sample_index):
        """Test comparators are swappable."""
        text = sample_index.render(group_key=lambda g: [-int(p) for p in g.split('.')])
        assert text.index("## ubuntu 22.04") < text.index("## ubuntu 18.04")

    def test_invalid_group_fails(self):
        """Test comparator failure propagates."""
        index = ReleaseIndex.build([ArchiveRecord("x.y", "1.0.0", "x.y/a-1.0.0.tar.xz"),
                                    ArchiveRecord("1.0", "1.0.0", "1.0/a-1.0.0.tar.xz")])
        with pytest.raises(InvalidVersion):
            index.render()

    def test_records_in_render_order(self, sample_index):
        names = [r.canonical_name for r in sample_index.records()]
        assert names[0] == "18.04/python-3.6.15.tar.xz"
        assert names[-1] == "22.04/python-3.10.12.tar.xz"
