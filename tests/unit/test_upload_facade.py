"""Tests for UploadFacade."""
import pytest
from chunkpy.core.exceptions import InvalidInputError
from chunkpy.core.transport import AiohttpTransport, TransportConfig
from chunkpy.core.upload import UploadFacade, UploadConfig, Phase
from chunkpy.core.upload.services import FileSource


class TestUploadFacade:
    """Test suite for UploadFacade."""
    
    @pytest.fixture
    def temp_file(self, tmp_path):
        path = tmp_path / "video.mp4"
        path.write_bytes(b"x" * 5000)
        return path
    
    @pytest.mark.asyncio
    async def test_url_builds_transport(self):
        """Test a URL string is turned into a transport."""
        async with UploadFacade("http://localhost:8080/api.php") as uploader:
            assert isinstance(uploader.transport, AiohttpTransport)
            assert uploader.transport.config.url == "http://localhost:8080/api.php"
    
    @pytest.mark.asyncio
    async def test_config_builds_transport(self):
        """Test a TransportConfig is wrapped in a transport."""
        config = TransportConfig.for_url("http://localhost/upload")
        
        async with UploadFacade(config) as uploader:
            assert uploader.transport.config is config
    
    @pytest.mark.asyncio
    async def test_create_engine(self, temp_file):
        """Test engine is created idle over a file source."""
        async with UploadFacade("http://localhost/api.php") as uploader:
            engine = uploader.create_engine(temp_file, name="clip.mp4")
        
        assert isinstance(engine.source, FileSource)
        assert engine.source.name == "clip.mp4"
        assert engine.source.size == 5000
        assert engine.phase is Phase.IDLE
    
    @pytest.mark.asyncio
    async def test_file_size_limit(self, temp_file):
        """Test oversized files are rejected."""
        config = UploadConfig(file_size_limit=1000)
        
        async with UploadFacade("http://localhost/api.php", config) as uploader:
            with pytest.raises(InvalidInputError):
                uploader.create_engine(temp_file)
    
    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """Test missing files are rejected."""
        async with UploadFacade("http://localhost/api.php") as uploader:
            with pytest.raises(InvalidInputError):
                uploader.create_engine(tmp_path / "nope.bin")
