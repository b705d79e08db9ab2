from .eth import get_account, get_address, key_source, load_private_key

__all__ = ["get_account", "get_address", "key_source", "load_private_key"]
