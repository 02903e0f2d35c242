"""
Document-wide optional column decision.

comp4/comp5 columns appear in every table of a document when any line of
the visit fills them, and in none otherwise. Resolve once per document and
pass the result around; deciding per line gives ragged tables.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnSchema:
    has_comp4: bool = False
    has_comp5: bool = False


def _filled(value):
    return value is not None and bool(str(value).strip())


def resolve(lines):
    has_comp4 = False
    has_comp5 = False
    for line in lines or []:
        has_comp4 = has_comp4 or _filled(line.comp4)
        has_comp5 = has_comp5 or _filled(line.comp5)
    return ColumnSchema(has_comp4=has_comp4, has_comp5=has_comp5)
