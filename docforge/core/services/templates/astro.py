"""
Astro template — static docs site built with Astro.

Tool-owned files are regenerated by ``docforge update``; ``package.json``,
``.gitignore`` and ``docs.json`` belong to the site owner after ``create``.
"""

from __future__ import annotations

import html
import json
import logging
import re
from pathlib import Path

from docforge.core.models.manifest import TemplateVariant
from docforge.core.models.template import TemplateArgs
from docforge.core.models.theme import get_theme, theme_for_accent
from docforge.core.services.templates.base import (
    DEFAULT_PAGE,
    DEFAULT_PROJECT_NAME,
    TemplateProvider,
    read_text_or_none,
    search_group,
    static_template,
)

logger = logging.getLogger(__name__)


# ── Static files ────────────────────────────────────────────────


_ASTRO_CONFIG = """\
import { defineConfig } from 'astro/config'

export default defineConfig({
  site: 'http://localhost:4321',
  markdown: {
    shikiConfig: { theme: 'github-dark-dimmed', wrap: true },
  },
})
"""

_TSCONFIG = """\
{
  "extends": "astro/tsconfigs/strict",
  "compilerOptions": {
    "baseUrl": ".",
    "paths": { "@/*": ["src/*"] }
  }
}
"""

_GLOBAL_CSS = """\
@import './tokens.css';
@import './base.css';
@import './markdown.css';
"""

_BASE_CSS = """\
*, *::before, *::after { box-sizing: border-box; }

html { color-scheme: light dark; }

body {
  margin: 0;
  font-family: var(--font-sans);
  background: var(--color-bg);
  color: var(--color-fg);
  line-height: 1.6;
}

a { color: var(--color-accent); text-decoration: none; }
a:hover { text-decoration: underline; }

.site-header {
  position: sticky;
  top: 0;
  display: flex;
  align-items: center;
  gap: 1rem;
  padding: 0.75rem 1.5rem;
  border-bottom: 1px solid var(--color-border);
  background: var(--color-bg);
}

.docs-grid {
  display: grid;
  grid-template-columns: 16rem minmax(0, 1fr) 14rem;
  gap: 2rem;
  max-width: 90rem;
  margin: 0 auto;
  padding: 2rem 1.5rem;
}

@media (max-width: 64rem) {
  .docs-grid { grid-template-columns: minmax(0, 1fr); }
  .docs-grid > aside { display: none; }
}
"""

_MARKDOWN_CSS = """\
.markdown h1 { font-size: 2rem; margin: 0 0 1rem; }
.markdown h2 { font-size: 1.5rem; margin: 2rem 0 0.75rem; }
.markdown h3 { font-size: 1.2rem; margin: 1.5rem 0 0.5rem; }
.markdown p, .markdown ul, .markdown ol { margin: 0 0 1rem; }
.markdown code {
  font-family: var(--font-mono);
  font-size: 0.9em;
  padding: 0.1rem 0.3rem;
  border-radius: 0.25rem;
  background: var(--color-muted);
}
.markdown pre {
  padding: 1rem;
  overflow-x: auto;
  border-radius: 0.5rem;
}
.markdown pre code { padding: 0; background: none; }
.markdown blockquote {
  margin: 0 0 1rem;
  padding-left: 1rem;
  border-left: 3px solid var(--color-accent);
  color: var(--color-subtle);
}
"""

_DOCS_LAYOUT = """\
---
import BaseLayout from './BaseLayout.astro'
import SidebarNav from '../components/SidebarNav.astro'
import Toc from '../components/Toc.astro'

const { title, headings = [], currentId } = Astro.props
---

<BaseLayout title={title}>
  <div class="docs-grid">
    <aside><SidebarNav currentId={currentId} /></aside>
    <article class="markdown"><slot /></article>
    <aside><Toc headings={headings} /></aside>
  </div>
</BaseLayout>
"""

_SIDEBAR_NAV = """\
---
import { getNavGroups } from '../lib/nav'

const { currentId } = Astro.props
const groups = getNavGroups()
---

<nav class="sidebar">
  {groups.map((group) => (
    <section>
      <h4>{group.title}</h4>
      <ul>
        {group.items.map((item) => (
          <li>
            <a href={`/docs/${item.id}`} aria-current={item.id === currentId ? 'page' : undefined}>
              {item.title}
            </a>
          </li>
        ))}
      </ul>
    </section>
  ))}
</nav>
"""

_TOC = """\
---
const { headings = [] } = Astro.props
const items = headings.filter((h) => h.depth >= 2 && h.depth <= 3)
---

{items.length > 0 && (
  <nav class="toc">
    <h4>On this page</h4>
    <ul>
      {items.map((h) => (
        <li class={`depth-${h.depth}`}><a href={`#${h.slug}`}>{h.text}</a></li>
      ))}
    </ul>
  </nav>
)}
"""

_NAV_TS = """\
import docs from '../../docs.json'

export interface NavItem {
  id: string
  title: string
  description?: string
}

export interface NavGroup {
  id: string
  title: string
  items: NavItem[]
}

export function getNavGroups(): NavGroup[] {
  return (docs.groups ?? []) as NavGroup[]
}

export function findNavItem(id: string): NavItem | undefined {
  for (const group of getNavGroups()) {
    const item = group.items.find((i) => i.id === id)
    if (item) return item
  }
  return undefined
}
"""

_DOC_PAGE = """\
---
import DocsLayout from '../../layouts/DocsLayout.astro'
import { findNavItem } from '../../lib/nav'

export async function getStaticPaths() {
  const pages = await Astro.glob('../../../docs/*.md')
  return pages.map((page) => {
    const slug = page.file.split('/').pop().replace(/\\.md$/, '')
    return { params: { slug }, props: { page } }
  })
}

const { page } = Astro.props
const { slug } = Astro.params
const item = findNavItem(slug)
const title = page.frontmatter.title ?? item?.title ?? slug
---

<DocsLayout title={title} headings={page.getHeadings()} currentId={slug}>
  <page.Content />
</DocsLayout>
"""


# ── Parameterized files ─────────────────────────────────────────


def _tokens_css(args: TemplateArgs) -> str:
    theme = get_theme(args.theme)
    return (
        f"/* Theme: {theme.name} */\n"
        ":root {\n"
        f"  --color-accent: {theme.accent};\n"
        "  --color-bg: #ffffff;\n"
        "  --color-fg: #1f2328;\n"
        "  --color-subtle: #59636e;\n"
        "  --color-muted: #f6f8fa;\n"
        "  --color-border: #d1d9e0;\n"
        "  --font-sans: ui-sans-serif, system-ui, sans-serif;\n"
        "  --font-mono: ui-monospace, SFMono-Regular, Menlo, monospace;\n"
        "}\n"
        "\n"
        "@media (prefers-color-scheme: dark) {\n"
        "  :root {\n"
        f"    --color-accent-dark: {theme.accent_dark};\n"
        "    --color-accent: var(--color-accent-dark);\n"
        "    --color-bg: #0d1117;\n"
        "    --color-fg: #f0f6fc;\n"
        "    --color-subtle: #9198a1;\n"
        "    --color-muted: #151b23;\n"
        "    --color-border: #3d444d;\n"
        "  }\n"
        "}\n"
    )


def _base_layout(args: TemplateArgs) -> str:
    name = html.escape(args.project_name, quote=False)
    return f"""\
---
import '../styles/global.css'

const {{ title }} = Astro.props
const pageTitle = title ? `${{title}} — {name}` : '{name}'
---

<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{{pageTitle}}</title>
  </head>
  <body>
    <header class="site-header">
      <a class="site-title" href="/">{name}</a>
    </header>
    <main><slot /></main>
  </body>
</html>
"""


def _index_page(args: TemplateArgs) -> str:
    page = html.escape(args.default_page)
    return f"""\
---
---

<!doctype html>
<html lang="en">
  <head>
    <meta http-equiv="refresh" content="0; url=/docs/{page}" />
  </head>
  <body>
    <a href="/docs/{page}">Continue to the documentation</a>
  </body>
</html>
"""


def _package_json(args: TemplateArgs) -> str:
    return json.dumps(
        {
            "name": args.project_name,
            "version": "0.1.0",
            "private": True,
            "type": "module",
            "scripts": {
                "dev": "astro dev",
                "build": "astro build",
                "preview": "astro preview",
            },
            "dependencies": {
                "astro": "^4.15.0",
            },
        },
        indent=2,
    ) + "\n"


_GITIGNORE = """\
# Dependencies
node_modules
.pnpm-store

# Astro
dist
.astro

# docforge
.docforge-backup
.docforge.lock

# Misc
.DS_Store
*.log
"""


# ── Inference patterns ──────────────────────────────────────────

_ACCENT_RE = re.compile(r"--color-accent:\s*(#[0-9a-fA-F]{3,8})\s*;")
_TITLE_RE = re.compile(r'<a class="site-title" href="/">(.*?)</a>')
_REDIRECT_RE = re.compile(r'url=/docs/([^"]+)"')


class AstroTemplate(TemplateProvider):
    """Static Astro docs site."""

    variant = TemplateVariant.ASTRO
    label = "Astro"
    dev_url = "http://localhost:4321/docs/"

    owned_files = (
        "astro.config.mjs",
        "tsconfig.json",
        "src/styles/global.css",
        "src/styles/tokens.css",
        "src/styles/base.css",
        "src/styles/markdown.css",
        "src/layouts/BaseLayout.astro",
        "src/layouts/DocsLayout.astro",
        "src/components/SidebarNav.astro",
        "src/components/Toc.astro",
        "src/lib/nav.ts",
        "src/pages/index.astro",
        "src/pages/docs/[...slug].astro",
    )
    consumer_files = ("package.json", ".gitignore", "docs.json")
    marker_files = ("astro.config.mjs", "src/layouts/BaseLayout.astro")

    templates = {
        "astro.config.mjs": static_template(_ASTRO_CONFIG),
        "tsconfig.json": static_template(_TSCONFIG),
        "src/styles/global.css": static_template(_GLOBAL_CSS),
        "src/styles/tokens.css": _tokens_css,
        "src/styles/base.css": static_template(_BASE_CSS),
        "src/styles/markdown.css": static_template(_MARKDOWN_CSS),
        "src/layouts/BaseLayout.astro": _base_layout,
        "src/layouts/DocsLayout.astro": static_template(_DOCS_LAYOUT),
        "src/components/SidebarNav.astro": static_template(_SIDEBAR_NAV),
        "src/components/Toc.astro": static_template(_TOC),
        "src/lib/nav.ts": static_template(_NAV_TS),
        "src/pages/index.astro": _index_page,
        "src/pages/docs/[...slug].astro": static_template(_DOC_PAGE),
    }
    consumer_templates = {
        "package.json": _package_json,
        ".gitignore": static_template(_GITIGNORE),
    }

    def infer_args(self, directory: Path) -> TemplateArgs:
        tokens = read_text_or_none(directory / "src/styles/tokens.css")
        accent = search_group(_ACCENT_RE, tokens)
        theme = theme_for_accent(accent) if accent else None
        if theme is None:
            logger.info("Could not infer theme from tokens.css — using default")

        layout = read_text_or_none(directory / "src/layouts/BaseLayout.astro")
        title = search_group(_TITLE_RE, layout)
        project_name = html.unescape(title) if title else DEFAULT_PROJECT_NAME

        index = read_text_or_none(directory / "src/pages/index.astro")
        page = search_group(_REDIRECT_RE, index)
        default_page = html.unescape(page) if page else DEFAULT_PAGE

        return TemplateArgs(
            project_name=project_name,
            theme=theme,
            default_page=default_page,
        )
