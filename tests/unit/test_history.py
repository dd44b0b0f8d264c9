"""Tests for the zip-backed history repository."""

import zipfile
from datetime import datetime, timedelta

import pytest

from app.models.history import INDEX_NAME, HistoryEntry
from app.repositories.history import MISS, HistoryRepository

BOUNDED = (
    "audit event list --all --start-time 2024-01-01T00:00:00Z --end-time 2024-01-02T00:00:00Z "
    "--compartment-id ocid1.compartment.oc1..c1"
)
UNBOUNDED = "iam compartment list --all --compartment-id-in-subtree true"
T0 = datetime(2024, 1, 10, 12, 0, 0)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(T0)


@pytest.fixture
def archive(tmp_path):
    return tmp_path / "audit_hist.zip"


class TestLookup:
    def test_disabled(self):
        repo = HistoryRepository(None)
        assert not repo.enabled
        assert repo.lookup(BOUNDED) is MISS
        assert repo.store(BOUNDED, {"data": []}) is False

    def test_missing_signature(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        assert repo.lookup(BOUNDED) is MISS

    def test_bounded_never_expires(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, {"data": [{"event-id": "e1"}]})

        clock.now = T0 + timedelta(days=400)
        assert repo.lookup(BOUNDED) == {"data": [{"event-id": "e1"}]}

    def test_unbounded_expires(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(UNBOUNDED, {"data": [{"id": "c1"}]})

        clock.now = T0 + timedelta(days=2, hours=23)
        assert repo.lookup(UNBOUNDED) == {"data": [{"id": "c1"}]}

        clock.now = T0 + timedelta(days=3)
        assert repo.lookup(UNBOUNDED) is MISS

    def test_custom_validity(self, archive, clock):
        repo = HistoryRepository(archive, validity=60, clock=clock)
        repo.store(UNBOUNDED, {"data": []})
        clock.now = T0 + timedelta(seconds=120)
        assert repo.lookup(UNBOUNDED) is MISS

    def test_none_payload_is_a_hit(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, None)
        assert repo.lookup(BOUNDED) is None

    def test_exact_signature_match(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(f"us-ashburn-1 {BOUNDED}", {"data": [1]})
        assert repo.lookup(BOUNDED) is MISS


class TestStore:
    def test_sequential_filenames(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store("a --start-time x --end-time y", {"data": [1]})
        repo.store("b --start-time x --end-time y", {"data": [2]})

        with zipfile.ZipFile(archive) as zf:
            assert sorted(zf.namelist()) == ["1.json", "2.json", INDEX_NAME]
            assert zf.read(INDEX_NAME).decode() == (
                "a --start-time x --end-time y|1.json\nb --start-time x --end-time y|2.json\n"
            )

    def test_refresh_overwrites_in_place(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(UNBOUNDED, {"data": ["old"]})
        clock.now = T0 + timedelta(days=5)
        assert repo.lookup(UNBOUNDED) is MISS

        repo.store(UNBOUNDED, {"data": ["new"]})

        assert repo.lookup(UNBOUNDED) == {"data": ["new"]}
        assert len(repo) == 1
        with zipfile.ZipFile(archive) as zf:
            assert sorted(zf.namelist()) == ["1.json", INDEX_NAME]

    def test_persists_across_instances(self, archive, clock):
        HistoryRepository(archive, clock=clock).store(BOUNDED, {"data": [42]})

        reopened = HistoryRepository(archive, clock=clock)
        assert BOUNDED in reopened
        assert len(reopened) == 1
        assert reopened.lookup(BOUNDED) == {"data": [42]}

        reopened.store(UNBOUNDED, {"data": []})
        with zipfile.ZipFile(archive) as zf:
            assert "2.json" in zf.namelist()

    def test_continues_numbering_after_gaps(self, archive, clock):
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(INDEX_NAME, "old --start-time a --end-time b|7.json\n")
            zf.writestr("7.json", '{"data": []}')

        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, {"data": [1]})

        with zipfile.ZipFile(archive) as zf:
            assert "8.json" in zf.namelist()
            assert "7.json" in zf.namelist()

    def test_ambiguous_index(self, archive, clock):
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(INDEX_NAME, f"{BOUNDED}|1.json\n{BOUNDED}|2.json\n")
            zf.writestr("1.json", '{"data": [1]}')
            zf.writestr("2.json", '{"data": [2]}')

        repo = HistoryRepository(archive, clock=clock)
        assert repo.lookup(BOUNDED) is MISS
        assert repo.store(BOUNDED, {"data": [3]}) is False

    def test_missing_payload_member(self, archive, clock):
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(INDEX_NAME, f"{BOUNDED}|1.json\n")

        assert HistoryRepository(archive, clock=clock).lookup(BOUNDED) is MISS

    def test_no_temp_file_left(self, archive, clock):
        HistoryRepository(archive, clock=clock).store(BOUNDED, {"data": []})
        assert [p.name for p in archive.parent.iterdir()] == [archive.name]


class TestHistoryEntry:
    def test_parse_line(self):
        entry = HistoryEntry.from_line(f"{BOUNDED}|12.json\n")
        assert entry.signature == BOUNDED
        assert entry.number == 12
        assert entry.is_bounded

    def test_leading_space_from_regionless_runs(self):
        entry = HistoryEntry.from_line(f" {UNBOUNDED}|3.json")
        assert entry.signature == UNBOUNDED
        assert not entry.is_bounded

    def test_garbage(self):
        assert HistoryEntry.from_line("no separator here") is None
        assert HistoryEntry.from_line("sig|notanumber.json") is None


class TestUnreadableArchive:
    @pytest.mark.parametrize("content", [b"", b"PK\x03\x04truncated", b"not a zip"])
    def test_lookup_misses(self, archive, clock, content):
        archive.write_bytes(content)

        repo = HistoryRepository(archive, clock=clock)

        assert repo.enabled
        assert len(repo) == 0
        assert repo.lookup(BOUNDED) is MISS

    def test_store_leaves_file_alone(self, archive, clock):
        archive.write_bytes(b"")

        repo = HistoryRepository(archive, clock=clock)

        assert repo.store(BOUNDED, {"data": [1]}) is False
        assert archive.read_bytes() == b""
        assert [p.name for p in archive.parent.iterdir()] == [archive.name]

    def test_archive_removed_during_run(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, {"data": [1]})
        archive.unlink()

        assert repo.lookup(BOUNDED) is MISS

    def test_archive_replaced_during_run(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, {"data": [1]})
        archive.write_bytes(b"garbage")

        assert repo.lookup(BOUNDED) is MISS


class TestMemberCompression:
    def test_members_stored_uncompressed(self, archive, clock):
        repo = HistoryRepository(archive, clock=clock)
        repo.store(BOUNDED, {"data": [1]})
        repo.store(UNBOUNDED, {"data": [2]})

        with zipfile.ZipFile(archive) as zf:
            assert {i.compress_type for i in zf.infolist()} == {zipfile.ZIP_STORED}

    def test_deflated_members_carried_over(self, archive, clock):
        created = (2023, 6, 1, 8, 30, 0)
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(zipfile.ZipInfo("1.json", date_time=created), '{"data": ["old"]}')
            zf.writestr(INDEX_NAME, f"{BOUNDED}|1.json\n")

        HistoryRepository(archive, clock=clock).store(UNBOUNDED, {"data": []})

        with zipfile.ZipFile(archive) as zf:
            old = zf.getinfo("1.json")
            assert old.date_time == created
            assert old.compress_type == zipfile.ZIP_STORED
            assert zf.read(old) == b'{"data": ["old"]}'
        assert HistoryRepository(archive, clock=clock).lookup(BOUNDED) == {"data": ["old"]}
