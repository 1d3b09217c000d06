"""Tests for run summaries."""

from app.shared.seeder.report import (
    CollectionOutcome,
    ErrorKind,
    RecordOutcome,
    exit_code,
    summarize,
)


def tally(*outcomes):
    collection = CollectionOutcome()
    for outcome in outcomes:
        collection.add(outcome)
    return collection


def ok(identity):
    return RecordOutcome.success("users", identity)


def failed(identity, error):
    return RecordOutcome.failure("users", identity, error, ErrorKind.RECORD_WRITE)


class TestCollectionOutcome:
    """Tests for per-collection tallies."""

    def test_counts_add_up(self):
        """succeeded + failed should equal attempted."""
        outcome = tally(ok("a"), failed("b", "User b: boom"), ok("c"))

        assert outcome.attempted == 3
        assert outcome.succeeded == 2
        assert outcome.failed == 1
        assert outcome.succeeded + outcome.failed == outcome.attempted
        assert outcome.errors == ["User b: boom"]


class TestSummarize:
    """Tests for summarize."""

    def test_success_message(self):
        """No errors should give the fixed success message."""
        result = summarize({"users": tally(ok("a")), "settings": tally()})

        assert result.success is True
        assert result.message == "Demo data seeded successfully"
        assert result.counts == {"users": 1, "settings": 0}
        assert result.errors == []
        assert exit_code(result) == 0

    def test_error_message_carries_count(self):
        """Errors should be counted in the message."""
        result = summarize({"users": tally(failed("a", "x"), failed("b", "y"))})

        assert result.success is False
        assert result.message == "Seeding completed with 2 errors"
        assert result.exit_code == 1

    def test_errors_keep_collection_then_record_order(self):
        """The error log should follow processing order."""
        result = summarize(
            {
                "users": tally(failed("a", "User a: 1"), failed("b", "User b: 2")),
                "settings": tally(failed("k", "Setting k: 3")),
            }
        )

        assert result.errors == ["User a: 1", "User b: 2", "Setting k: 3"]

    def test_clear_messages(self):
        """Clear runs should use clear wording."""
        assert summarize({}, "clear").message == "Demo data cleared successfully"
        assert (
            summarize({"users": tally(failed("a", "x"))}, "clear").message
            == "Clearing completed with 1 errors"
        )

    def test_totals(self):
        """Totals should sum across collections."""
        result = summarize({"users": tally(ok("a"), failed("b", "x")), "settings": tally(ok("k"))})

        assert result.total_succeeded == 2
        assert result.total_failed == 1
