# coding: utf_8
"""
Qualifiers of a feature block: ``/key="value"``, ``/key=value`` and bare ``/flag`` tokens.
"""
import re

_quoted = re.compile(r'/([^\s=/"]+)="(.*?)"', re.S)
_unquoted = re.compile(r'^/([^\s=/"]+)=([^"\s]\S*)\s*$', re.M)
_flag = re.compile(r'^/([^\s=/"]+)\s*$', re.M)
_spaces = re.compile(r'\s+')


def parse_qualifiers(value):
    """
    Extract the qualifiers from a feature block.

    Quoted values spanning several lines are folded into a single line with normalised whitespace, bare flags map
    to an empty string. A key seen more than once keeps its last value.

    :param value: The raw feature text
    :return: dict of qualifier name to value
    """
    result = dict()
    for key, text in _unquoted.findall(value):
        result[key] = text
    for match in _quoted.finditer(value):
        result[match.group(1)] = _spaces.sub(' ', match.group(2)).strip()
    for key in _flag.findall(value):
        if key not in result:
            result[key] = ''
    return result
