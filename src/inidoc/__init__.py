# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2023/11/14 20:01:52
# @Author : Chloride

import logging

from .ini import (
    IniDocument, IniSection, IniSyntaxError, IniScannerFault,
    IniParser, IniJsonParser, IniYamlParser, InvalidIniRecord,
    parse, dumps
)

__all__ = [
    'IniDocument', 'IniSection', 'IniSyntaxError', 'IniScannerFault',
    'IniParser', 'IniJsonParser', 'IniYamlParser', 'InvalidIniRecord',
    'parse', 'dumps'
]

__version__ = '0.1.0'

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
