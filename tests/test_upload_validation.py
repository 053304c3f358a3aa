"""
Unit tests for upload validation
"""
from app.core.upload_validation import validate_upload


class TestValidateUpload:

    def test_valid(self):
        assert validate_upload("dir/report.pdf", 10, 100) == ("report.pdf", None)

    def test_missing_filename(self):
        assert validate_upload(None, 10, 100) == (None, "No file uploaded")
        assert validate_upload("", 10, 100) == (None, "No file uploaded")

    def test_bad_filename(self):
        name, err = validate_upload("..", 10, 100)
        assert name is None
        assert err == "Invalid filename"

    def test_too_large(self):
        name, err = validate_upload("big.bin", 3 * 1024 * 1024, 2 * 1024 * 1024)
        assert name == "big.bin"
        assert err == "File too large. Max size: 2 MB"
