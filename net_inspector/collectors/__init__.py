from .httpx_transport import RecordingTransport

__all__ = ["RecordingTransport"]
