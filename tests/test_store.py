import json

from onething.database.manager import MemoryStore, parse_entries, parse_profile
from onething.models import UserProfile, WrapUpMode

from tests.helpers import TODAY, YESTERDAY, make_entry, make_profile, make_task


class TestJsonFileStore:

    def test_empty_store_gives_defaults(self, file_store):
        profile = file_store.read_profile()

        assert profile.current_level == 1
        assert profile.current_level_streak == 0
        assert file_store.read_entries() == {}

    def test_profile_round_trip(self, file_store):
        profile = make_profile(name="Ana", current_level=2, current_level_streak=4, longest_streak=9)

        assert file_store.write_profile(profile) is True

        assert file_store.read_profile() == profile
        on_disk = json.loads(file_store.profile_path.read_text(encoding='utf-8'))
        assert on_disk['currentLevelStreak'] == 4
        assert on_disk['reminders']['wrapUpMode'] == 'daily'

    def test_entries_are_merged_by_date(self, file_store):
        first = make_entry(YESTERDAY, [make_task(done=True)])
        second = make_entry(TODAY, [make_task("Plan", scheduled_time="10:00")])

        file_store.write_entry(first)
        file_store.write_entry(second)

        entries = file_store.read_entries()
        assert set(entries) == {YESTERDAY, TODAY}
        assert entries[TODAY].tasks[0].scheduled_time == "10:00"
        assert file_store.read_entry(YESTERDAY).completed is True
        assert file_store.read_entry("2020-01-01") is None

    def test_no_temp_file_left_behind(self, file_store, storage_config):
        file_store.write_profile(make_profile())
        assert [p.name for p in storage_config.data_dir.iterdir()] == ["profile.json"]

    def test_corrupted_file_is_quarantined(self, file_store, storage_config):
        storage_config.data_dir.mkdir(parents=True)
        file_store.entries_path.write_text("{not json", encoding='utf-8')

        assert file_store.read_entries() == {}

        assert not file_store.entries_path.exists()
        backups = list(storage_config.backup_dir.iterdir())
        assert len(backups) == 1
        assert backups[0].name.startswith("corrupted_backup_")
        assert backups[0].read_text(encoding='utf-8') == "{not json"

        file_store.write_entry(make_entry(TODAY, [make_task()]))
        assert set(file_store.read_entries()) == {TODAY}

    def test_invalid_entry_is_dropped(self, file_store, storage_config):
        good = make_entry(TODAY, [make_task()]).to_dict()
        storage_config.data_dir.mkdir(parents=True)
        file_store.entries_path.write_text(json.dumps({
            TODAY: good,
            YESTERDAY: {"date": YESTERDAY, "tasks": [{"text": ""}]},
            "2024-03-01": {"date": "2024-03-02", "tasks": []},
            "2024-02-30": "junk",
        }), encoding='utf-8')

        assert set(file_store.read_entries()) == {TODAY}

    def test_invalid_profile_falls_back_to_defaults(self, file_store, storage_config):
        storage_config.data_dir.mkdir(parents=True)
        file_store.profile_path.write_text(json.dumps({"currentLevel": 7, "name": "Ana"}), encoding='utf-8')

        profile = file_store.read_profile()

        assert profile.current_level == 1
        assert profile.name == ""

    def test_legacy_profile_is_migrated_on_read(self, file_store, storage_config):
        storage_config.data_dir.mkdir(parents=True)
        file_store.profile_path.write_text(json.dumps({
            "currentLevel": 2,
            "remindersEnabled": True,
            "pickTaskTime": "07:30",
            "wrapUpTime": "19:00",
        }), encoding='utf-8')

        profile = file_store.read_profile()

        assert profile.current_level == 2
        assert profile.reminders.pick_task.enabled and profile.reminders.pick_task.time == "07:30"
        assert profile.reminders.wrap_up_mode == WrapUpMode.PER_TASK

    def test_clear_all(self, file_store):
        file_store.write_profile(make_profile(current_level=3))
        file_store.write_entry(make_entry(TODAY, [make_task()]))

        file_store.clear_all()
        file_store.clear_all()

        assert not file_store.profile_path.exists()
        assert file_store.read_profile().current_level == 1
        assert file_store.read_entries() == {}

    def test_write_failure_is_reported_not_raised(self, file_store, storage_config):
        storage_config.data_dir.mkdir(parents=True)
        # A directory where the file should be makes the final replace fail
        file_store.profile_path.mkdir()

        assert file_store.write_profile(make_profile()) is False


class TestMemoryStore:

    def test_round_trip(self, memory_store):
        memory_store.write_profile(make_profile(current_level=2))
        memory_store.write_entry(make_entry(TODAY, [make_task()], level=2))

        assert memory_store.read_profile().current_level == 2
        assert memory_store.read_entry(TODAY).level_at_time == 2
        assert isinstance(memory_store.profile_data, dict)

    def test_seeded_with_raw_records(self):
        store = MemoryStore(
            profile_data={"currentLevel": 3, "reminderEnabled": True, "reminderTime": "06:45"},
            entries_data={TODAY: {"date": TODAY, "tasks": [{"text": "Run"}], "completed": True}},
        )

        profile = store.read_profile()
        assert profile.current_level == 3
        assert profile.reminders.pick_task.time == "06:45"
        # Stored flag disagrees with the tasks
        assert store.read_entry(TODAY).completed is False

    def test_clear_all(self, memory_store):
        memory_store.write_profile(make_profile(current_level=2))
        memory_store.clear_all()
        assert memory_store.read_profile().current_level == 1


def test_parse_helpers_tolerate_wrong_types():
    profile = parse_profile(["not", "a", "dict"])
    assert isinstance(profile, UserProfile)
    assert profile.current_level == 1
    assert parse_entries("nope") == {}
    assert parse_entries(None) == {}
