"""
Eject — hand one default Next.js component over to the site owner.

An ejected component lives in ``src/components/overrides/<Name>.tsx``
and is consumer-owned from the moment it is written. Two modes:

    wrap   imports the default and composes it; template updates to the
           default still flow through
    full   a blank implementation with no default import

The override is wired in by patching the ``components`` map of
``src/lib/site-config.tsx``.
"""

from __future__ import annotations

import logging
import re

from docforge.core.services.templates.nextjs import (
    EJECTABLE_COMPONENTS,
    OVERRIDES_DIR,
    EjectableComponent,
)

logger = logging.getLogger(__name__)

_DEFAULTS_MODULE = "@/components/defaults"


class EjectError(Exception):
    """Raised when a component cannot be ejected."""


def get_component(name: str) -> EjectableComponent:
    """Look up an ejectable component by name.

    Raises:
        EjectError: If ``name`` is not ejectable.
    """
    try:
        return EJECTABLE_COMPONENTS[name]
    except KeyError:
        valid = ", ".join(EJECTABLE_COMPONENTS)
        raise EjectError(f"Unknown component: {name} (available: {valid})") from None


def override_path(name: str) -> str:
    return f"{OVERRIDES_DIR}/{name}.tsx"


def render_override(component: EjectableComponent, *, full: bool = False) -> str:
    """Starter source for an override component."""
    name = component.name
    props_type = component.props_type
    if full:
        return f"""\
'use client'

import type {{ {props_type} }} from '{_DEFAULTS_MODULE}'

export default function {name}({component.props}: {props_type}) {{
  return (
    <div>
      {{/* Your complete custom {name} implementation */}}
    </div>
  )
}}
"""
    return f"""\
'use client'

import {{ {name} as Default{name} }} from '{_DEFAULTS_MODULE}'
import type {{ {props_type} }} from '{_DEFAULTS_MODULE}'

export default function {name}(props: {props_type}) {{
  // Wrap the default: add your own content or behavior around it.
  return (
    <div>
      {{/* Add custom content above */}}
      <Default{name} {{...props}} />
      {{/* Add custom content below */}}
    </div>
  )
}}
"""


def _override_import(name: str) -> str:
    return f"import Custom{name} from '@/components/overrides/{name}'"


def wire_override(site_config: str, name: str) -> str | None:
    """Point the ``components`` entry for ``name`` at its override.

    Returns:
        The patched source, the input unchanged if it is already wired,
        or None when the file no longer has a ``Name: DefaultName`` entry
        to replace.
    """
    import_line = _override_import(name)
    if import_line in site_config:
        return site_config

    entry = re.compile(rf"(\b{name}:\s*)Default{name}\b")
    if not entry.search(site_config):
        logger.debug("No default %s entry in site config", name)
        return None

    lines = site_config.split("\n")
    last_import = -1
    for i, line in enumerate(lines):
        if line.startswith("import ") or line.startswith("} from "):
            last_import = i
    lines.insert(last_import + 1, import_line)

    return entry.sub(rf"\g<1>Custom{name}", "\n".join(lines), count=1)
