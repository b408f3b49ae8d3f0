from .lcd import LcdClient
from .rpc import CometRpcClient

__all__ = ['LcdClient', 'CometRpcClient']
