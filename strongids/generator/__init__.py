"""Strongly-typed identifier code generator."""

from .extract import descriptor as descriptor
from .extract import descriptor_from_dict as descriptor_from_dict
from .extract import extract as extract
from .extract import extract_all as extract_all
from .extract import resolve_backing_kind as resolve_backing_kind
from .parser import ValidationError as ValidationError
from .parser import parse as parse
from .types import *
