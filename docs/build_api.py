"""Writes the reStructuredText API pages for pointerset into this directory.

Run this before ``sphinx-build``. The combinators are grouped by what they return, and the configuration presets get
their own section, so the pages are organized around how the package is used rather than by source file.

"""

import inspect
import os
import sys
from pathlib import Path


DOCS_PATH = os.path.dirname(os.path.realpath(__file__))
ROOT_PATH = Path(DOCS_PATH).parents[0]

sys.path = [str(ROOT_PATH)] + sys.path

import pointerset
from pointerset import combinators

COMBINATOR_GROUPS = (
    ("Queries", "Traverse a set without modifying it.", ("each", "match", "reduce", "any", "all", "none")),
    ("Derived sets", "Return a new set sharing the source set's configuration.", ("select", "reject", "map")),
    ("In-place", "Modify the set they are given.", ("perform_select", "perform_reject", "perform_map")),
)

PRESETS = ("identity", "value", "custom", "preset")


def heading(title: str, underline: str) -> str:
    return f"{title}\n{underline * len(title)}\n"


def write_page(filename: str, content: str):
    with open(os.path.join(DOCS_PATH, filename), 'w') as f:
        f.write(content)


def identity_set_page() -> str:
    return f"""{heading("Identity sets", "=")}
.. automodule:: pointerset.identity_set

.. autoclass:: pointerset.IdentitySet
   :members:
   :special-members: __contains__, __len__, __iter__
   :show-inheritance:
"""


def configuration_page() -> str:
    page = [f"""{heading("Configuration", "=")}
.. automodule:: pointerset.config

.. autoclass:: pointerset.IdentityConfig
   :members:
   :exclude-members: {', '.join(PRESETS)}

{heading("Presets", "-")}
"""]
    for preset in PRESETS:
        page.append(f".. automethod:: pointerset.IdentityConfig.{preset}\n\n")
    page.append(heading("Storage and equality", "-"))
    for enum in (pointerset.Storage, pointerset.Equality):
        page.append(f"""
.. autoclass:: pointerset.{enum.__name__}
   :members:
   :undoc-members:
""")
    return ''.join(page)


def combinators_page() -> str:
    public = {
        name for name, func in inspect.getmembers(combinators, inspect.isfunction)
        if func.__module__ == combinators.__name__ and not name.startswith('_')
    }
    page = [f"""{heading("Combinators", "=")}
.. automodule:: pointerset.combinators

Every function here is also available as a method of :class:`pointerset.IdentitySet`.
"""]
    for title, blurb, names in COMBINATOR_GROUPS:
        page.append(f"\n{heading(title, '-')}\n{blurb}\n")
        for name in names:
            page.append(f"\n.. autofunction:: pointerset.combinators.{name}\n")
        public -= set(names)
    if public:
        page.append(f"\n{heading('Other', '-')}")
        for name in sorted(public):
            page.append(f"\n.. autofunction:: pointerset.combinators.{name}\n")
    return ''.join(page)


def exceptions_page() -> str:
    page = [f"""{heading("Exceptions", "=")}
.. automodule:: pointerset.exceptions
"""]
    for cls in (pointerset.IdentitySetError, pointerset.TypeMismatch, pointerset.InvalidConfig):
        page.append(f"""
.. autoexception:: pointerset.{cls.__name__}
   :show-inheritance:
""")
    return ''.join(page)


PAGES = (
    ("identity_set", identity_set_page),
    ("configuration", configuration_page),
    ("combinators", combinators_page),
    ("exceptions", exceptions_page),
)


if __name__ == "__main__":
    for page_name, build in PAGES:
        write_page(f"{page_name}.rst", build())

    write_page("index.rst", f"""{heading(f"pointerset {pointerset.VERSION_STRING}", "=")}
.. automodule:: pointerset

.. toctree::
   :maxdepth: 2

""" + '\n'.join(f'   {page_name}' for page_name, _ in PAGES) + '\n')
