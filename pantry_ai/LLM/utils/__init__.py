from .api_utils import APIManager, build_user_content
from .result_parser import ResultParser, extract

__all__ = ['APIManager', 'build_user_content', 'ResultParser', 'extract']
