"""台灣統一發票對獎工具"""

__version__ = "0.1.0"
