# Sphinx configuration for the pointerset documentation.
#
# Run ``python build_api.py`` first to regenerate the API pages, then ``sphinx-build . _build``.

import os
from pathlib import Path

VERSION_MODULE_PATH = os.path.join(Path(os.path.dirname(__file__)).parents[0], "pointerset", "version.py")


def get_version_string():
    attrs = {}
    with open(VERSION_MODULE_PATH) as f:
        exec(f.read(), attrs)
    vstring = attrs['VERSION_STRING']
    if 'git' in vstring:
        return vstring
    else:
        return f"v{vstring}"


project = 'pointerset'
copyright = '2026, the pointerset authors'
author = 'the pointerset authors'

release = get_version_string()
version = release

master_doc = 'index'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'sphinx.ext.doctest',
    'sphinx_rtd_theme',
]

exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'
html_theme_options = {
    'navigation_depth': 3,
    'collapse_navigation': False,
}


def skip(app, what, name, obj, would_skip, options):
    # the slot classes are storage internals and are not part of the API
    if name in ("Slot", "StrongSlot", "WeakSlot", "DEAD"):
        return True
    return would_skip


def setup(app):
    app.connect("autodoc-skip-member", skip)


add_module_names = False
autodoc_member_order = 'bysource'
autodoc_typehints = 'description'
intersphinx_mapping = {'python': ('https://docs.python.org/3', None)}
napoleon_google_docstring = True
napoleon_numpy_docstring = False
