"""Bibliography index used to resolve citation keys.

Architecture
: `BibliographyIndex` is the read-only protocol the resolver depends on: a
  single `lookup(key)` returning flat string fields (`author`, `year`, `date`,
  `title`, ...) or `None` when the key is unknown.
: `BibliographyCollection` is the pybtex-backed implementation. It merges one
  or more BibTeX sources and records loading problems as
  `BibliographyIssue` values instead of raising.

Usage Example

```pycon
>>> from prettycite.core.bibliography import BibliographyCollection
>>> collection = BibliographyCollection()
>>> collection.load_string(\"\"\"@book{CoxeterPG2ed,
...   author = {Coxeter, H.S.M.},
...   title = {Projective Geometry},
...   year = {1987},
... }\"\"\")
>>> collection.lookup("CoxeterPG2ed")["author"]
'Coxeter, H.S.M.'
```
"""

from __future__ import annotations

from .collection import BibliographyCollection, BibliographyIndex
from .issues import BibliographyIssue
from .parsing import bibliography_data_from_string


__all__ = [
    "BibliographyCollection",
    "BibliographyIndex",
    "BibliographyIssue",
    "bibliography_data_from_string",
]
