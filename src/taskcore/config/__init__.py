from .server_config import ServerConfig

__all__ = ["ServerConfig"]
