import unittest
from datetime import date

from planner.db import (
    InMemoryDbClient,
    PostgresDbClient,
    SchoolEntryRow,
    SpecialEntryRow,
    StorageError,
)


class UpsertContract:
    """Checks shared by every DbClient implementation."""

    def make_db(self):
        raise NotImplementedError

    def setUp(self):
        self.db = self.make_db()

    def test_missing_entries_are_none(self):
        self.assertIsNone(self.db.get_school_entry(date(2024, 7, 1)))
        self.assertIsNone(self.db.get_whatidid_entry(date(2024, 7, 1)))
        self.assertIsNone(self.db.get_special_entry("holiday_homework"))

    def test_school_insert_fills_empty_defaults(self):
        entry = self.db.upsert_school_entry(date(2024, 7, 1), {"p2": "History"})
        self.assertEqual(entry.date, date(2024, 7, 1))
        self.assertEqual(entry.p2, "History")
        self.assertEqual(entry.p1, "")
        self.assertEqual(entry.p8, "")

    def test_school_upsert_same_key_keeps_one_row(self):
        first = self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Maths"})
        second = self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Maths"})
        self.assertEqual(first.id, second.id)
        self.assertEqual(
            self.db.list_school_dates(date(2024, 7, 1), date(2024, 7, 31)),
            [date(2024, 7, 1)],
        )

    def test_school_update_touches_only_given_fields(self):
        self.db.upsert_school_entry(date(2024, 7, 2), {"p1": "Maths", "p2": "Art"})
        updated = self.db.upsert_school_entry(date(2024, 7, 2), {"p2": None, "p3": "PE"})
        self.assertEqual(updated.p1, "Maths")
        self.assertEqual(updated.p2, "")
        self.assertEqual(updated.p3, "PE")
        self.assertEqual(self.db.get_school_entry(date(2024, 7, 2)).p3, "PE")

    def test_unknown_field_raises(self):
        with self.assertRaises(ValueError):
            self.db.upsert_school_entry(date(2024, 7, 1), {"p9": "Lunch"})

    def test_whatidid_upsert_and_list(self):
        self.db.upsert_whatidid_entry(date(2024, 6, 30), {"ioqm": "Geometry"})
        self.db.upsert_whatidid_entry(date(2024, 7, 5), {"schol": "Essay"})
        self.db.upsert_whatidid_entry(date(2024, 7, 3), {"nsep": "Waves"})
        self.assertEqual(
            self.db.list_whatidid_dates(date(2024, 7, 1), date(2024, 7, 31)),
            [date(2024, 7, 3), date(2024, 7, 5)],
        )
        entry = self.db.get_whatidid_entry(date(2024, 6, 30))
        self.assertEqual(entry.ioqm, "Geometry")
        self.assertEqual(entry.schol, "")

    def test_special_upsert(self):
        first = self.db.upsert_special_entry("what_had_done", {"content": "chapter 1"})
        second = self.db.upsert_special_entry("what_had_done", {"content": None})
        self.assertEqual(first.id, second.id)
        self.assertEqual(second.content, "")
        self.assertEqual(self.db.get_special_entry("what_had_done").content, "")

    def test_special_update_without_content_keeps_it(self):
        first = self.db.upsert_special_entry("holiday_homework", {"content": "keep me"})
        second = self.db.upsert_special_entry("holiday_homework", {})
        self.assertEqual(first.id, second.id)
        self.assertEqual(second.content, "keep me")
        self.assertEqual(
            self.db.get_special_entry("holiday_homework").content, "keep me"
        )

    def test_special_insert_without_content_is_empty(self):
        self.assertEqual(self.db.upsert_special_entry("what_had_done", {}).content, "")

    def test_special_unknown_field_raises(self):
        with self.assertRaises(ValueError):
            self.db.upsert_special_entry("what_had_done", {"title": "x"})

    def test_users(self):
        user = self.db.create_user("admin", "secret")
        self.assertEqual(self.db.get_user_by_username("admin").id, user.id)
        self.assertEqual(self.db.get_user(user.id).username, "admin")
        self.assertIsNone(self.db.get_user_by_username("nobody"))
        with self.assertRaises(StorageError):
            self.db.create_user("admin", "other")


class InMemoryDbClientTests(UpsertContract, unittest.TestCase):
    def make_db(self):
        return InMemoryDbClient()

    def test_reset(self):
        self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Maths"})
        self.db.reset()
        self.assertIsNone(self.db.get_school_entry(date(2024, 7, 1)))
        entry = self.db.upsert_special_entry("what_had_done", {"content": "x"})
        self.assertEqual(entry.id, 1)


class PostgresDbClientTests(UpsertContract, unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def make_db(self):
        return PostgresDbClient("sqlite+pysqlite:///:memory:")

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            PostgresDbClient("")

    def test_sql_errors_become_storage_errors(self):
        self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Maths"})
        SchoolEntryRow.__table__.drop(self.db.engine)
        with self.assertRaises(StorageError):
            self.db.get_school_entry(date(2024, 7, 1))
        with self.assertRaises(StorageError):
            self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Art"})
        with self.assertRaises(StorageError):
            self.db.list_school_dates(date(2024, 7, 1), date(2024, 7, 31))

    def test_failed_write_leaves_other_tables_usable(self):
        SpecialEntryRow.__table__.drop(self.db.engine)
        with self.assertRaises(StorageError):
            self.db.upsert_special_entry("what_had_done", {"content": "x"})
        entry = self.db.upsert_school_entry(date(2024, 7, 1), {"p1": "Maths"})
        self.assertEqual(self.db.get_school_entry(date(2024, 7, 1)).id, entry.id)


if __name__ == "__main__":
    unittest.main()
