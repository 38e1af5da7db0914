# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 01:16:53
# @Author : Kariko Lin

from .consts import IniState
from .convert import IniJsonParser, IniYamlParser, InvalidIniRecord
from .model import IniDocument, IniSection
from .parser import IniParser, dumps, parse
from .scanner import IniScannerFault, IniSyntaxError, scan

__all__ = [
    'IniState',
    'IniDocument', 'IniSection',
    'IniSyntaxError', 'IniScannerFault', 'scan',
    'IniParser', 'parse', 'dumps',
    'IniJsonParser', 'IniYamlParser', 'InvalidIniRecord',
]
