"""Tests for the command-line interface."""
from typer.testing import CliRunner

from chunkpy.cli.main import app, format_status
from chunkpy.core.upload import UploadStatus

runner = CliRunner()


class TestFormatStatus:
    """Test suite for format_status."""
    
    def test_format(self):
        """Test speed, chunk and times are humanized."""
        status = UploadStatus(
            elapsed=65, estimate=3700, bytes=1024, percent=10,
            chunk=2048, speed=1536
        )
        
        assert format_status(status) == "1.5 KB/s (2 KB) 1:05 / 1:01:40"


class TestUploadCommand:
    """Test suite for the upload command."""
    
    def test_help(self):
        """Test help lists the options."""
        result = runner.invoke(app, ["upload", "--help"])
        
        assert result.exit_code == 0
        assert "--url" in result.output
        assert "--max-chunk" in result.output
    
    def test_missing_file(self, tmp_path):
        """Test a missing file is a usage error."""
        result = runner.invoke(app, [
            "upload", str(tmp_path / "missing.bin"), "--url", "http://localhost/api.php"
        ])
        
        assert result.exit_code == 2
    
    def test_invalid_chunk_bounds(self, tmp_path):
        """Test inverted chunk bounds are rejected before uploading."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abc")
        
        result = runner.invoke(app, [
            "upload", str(path), "--url", "http://localhost/api.php",
            "--min-chunk", "4096", "--max-chunk", "1024"
        ])
        
        assert result.exit_code == 1
        assert "Invalid options" in result.output
