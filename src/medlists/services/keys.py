"""Storage key layout for an owner's ``Lists`` folder."""

from __future__ import annotations

import re

DEFAULT_FOLDER = "Lists"
RESULTS_SUFFIX = "_results.json"
LIST_SUFFIX = "_list.json"
PLACEHOLDER_SUFFIX = ".keep"

_UNSAFE = re.compile(r"[^a-zA-Z0-9.-]")
_PDF_EXTENSION = re.compile(r"\.pdf$", re.IGNORECASE)


def clean_file_name(file_name: str) -> str:
    """``"My Chart (1).pdf"`` -> ``"My_Chart__1_.pdf"``."""
    return _UNSAFE.sub("_", file_name)


def file_stem(file_name: str) -> str:
    return _PDF_EXTENSION.sub("", clean_file_name(file_name))


def lists_folder(owner: str, folder: str = DEFAULT_FOLDER) -> str:
    return f"{owner}/{folder}/"


def results_key(owner: str, file_name: str, folder: str = DEFAULT_FOLDER) -> str:
    return f"{lists_folder(owner, folder)}{file_stem(file_name)}{RESULTS_SUFFIX}"


def list_key(owner: str, file_name: str, category: str, folder: str = DEFAULT_FOLDER) -> str:
    category_part = re.sub(r"\s+", "_", category.lower())
    return f"{lists_folder(owner, folder)}{file_stem(file_name)}_{category_part}{LIST_SUFFIX}"
