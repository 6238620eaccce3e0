"""Unit tests for write_flat."""

import pytest

from learning_pass.domain.flat.serializer import FlatRecord, to_flat
from learning_pass.domain.flat.writer import write_flat

CUSTOMER = {"firstName": "Lewis", "barcode": "21221012345678", "pin": "IlikeBread"}


@pytest.mark.unit
class TestWriteFlat:
    """Test suite for write_flat."""

    def test_writes_document(self, tmp_path):
        record = to_flat(CUSTOMER)
        target = tmp_path / "customer.flat"

        result = write_flat(record, target)

        assert result.success
        assert result.path == target
        assert target.read_text(encoding="utf-8") == record.stringify()

    def test_unix_line_endings(self, tmp_path):
        target = tmp_path / "customer.flat"

        write_flat(to_flat(CUSTOMER), target)

        assert b"\r\n" not in target.read_bytes()

    def test_overwrites_by_default(self, tmp_path):
        target = tmp_path / "customer.flat"
        target.write_text("old", encoding="utf-8")

        assert write_flat(to_flat(CUSTOMER), target).success
        assert target.read_text(encoding="utf-8").startswith("*** DOCUMENT BOUNDARY ***")

    def test_no_overwrite_fails_on_existing_file(self, tmp_path):
        target = tmp_path / "customer.flat"
        target.write_text("old", encoding="utf-8")

        result = write_flat(to_flat(CUSTOMER), target, overwrite=False)

        assert not result.success
        assert "already exists" in result.error
        assert target.read_text(encoding="utf-8") == "old"

    def test_missing_directory(self, tmp_path):
        result = write_flat(to_flat(CUSTOMER), tmp_path / "nowhere" / "customer.flat")

        assert not result.success
        assert "Directory does not exist" in result.error

    def test_empty_record_not_written(self, tmp_path):
        target = tmp_path / "customer.flat"

        result = write_flat(FlatRecord(errors=["Customer json data empty or missing."]), target)

        assert not result.success
        assert result.error == "Flat record has no data to write."
        assert not target.exists()

    def test_without_path_logs_document(self):
        result = write_flat(to_flat(CUSTOMER))

        assert result.success
        assert result.path is None

    def test_record_reusable_after_failure(self, tmp_path):
        record = to_flat(CUSTOMER)

        assert not write_flat(record, tmp_path / "missing" / "a.flat").success
        assert write_flat(record, tmp_path / "a.flat").success
