"""Parsers for advisory API responses."""

from route_notams.parsers.geojson_parser import ResponseParser, PageParseResult

__all__ = ['ResponseParser', 'PageParseResult']
