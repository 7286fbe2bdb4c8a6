"""FAA NOTAM API access."""

from route_notams.api.credentials import Credential, CredentialPool
from route_notams.api.query import NotamQuery, QueryBuilder
from route_notams.api.fetcher import FetchOrchestrator, FetchReport, RawPage

__all__ = [
    'Credential',
    'CredentialPool',
    'NotamQuery',
    'QueryBuilder',
    'FetchOrchestrator',
    'FetchReport',
    'RawPage',
]
