"""
Next.js template — App Router docs site with a static export.

``src/lib/site-config.tsx`` is the owner's customization point (site name,
default page, theme, component overrides). It is written once by
``docforge create`` and never touched by ``docforge update``; only
``docforge eject`` edits it, to wire in an override component.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

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

SITE_CONFIG = "src/lib/site-config.tsx"
OVERRIDES_DIR = "src/components/overrides"


class EjectableComponent(BaseModel):
    """A default component a site can replace with its own override."""

    model_config = ConfigDict(frozen=True)

    name: str
    props_type: str
    props: str          # destructured signature for a full eject
    description: str
    tier: str = "safe"  # "advanced" when an override takes over a pipeline


EJECTABLE_COMPONENTS: dict[str, EjectableComponent] = {
    c.name: c
    for c in (
        EjectableComponent(
            name="Header",
            props_type="HeaderProps",
            props="{ projectName, homeUrl, showThemeToggle }",
            description="Sticky header with project name, navigation and theme toggle",
        ),
        EjectableComponent(
            name="Sidebar",
            props_type="SidebarProps",
            props="{ tree, currentPage, projectName, basePath }",
            description="Navigation sidebar with grouped pages and active page highlight",
        ),
        EjectableComponent(
            name="TableOfContents",
            props_type="TableOfContentsProps",
            props="{ items, title, markdown }",
            description="On-this-page heading links (accepts a markdown prop)",
        ),
        EjectableComponent(
            name="MarkdownContent",
            props_type="MarkdownContentProps",
            props="{ content }",
            description="Markdown rendering pipeline",
            tier="advanced",
        ),
    )
}


_NEXT_CONFIG = """\
/** @type {import('next').NextConfig} */
const nextConfig = {
  output: 'export',
  trailingSlash: true,
  images: { unoptimized: true },
}

module.exports = nextConfig
"""

_TSCONFIG = """\
{
  "compilerOptions": {
    "target": "ES2020",
    "lib": ["dom", "dom.iterable", "esnext"],
    "allowJs": false,
    "skipLibCheck": true,
    "strict": true,
    "noEmit": true,
    "esModuleInterop": true,
    "module": "esnext",
    "moduleResolution": "bundler",
    "resolveJsonModule": true,
    "isolatedModules": true,
    "jsx": "preserve",
    "incremental": true,
    "plugins": [{ "name": "next" }],
    "paths": { "@/*": ["./src/*"] }
  },
  "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx"],
  "exclude": ["node_modules"]
}
"""

_PROVIDERS = """\
'use client'

import { ThemeProvider } from 'next-themes'
import { providerProps } from '@/lib/site-config'

export function Providers({ children }: { children: React.ReactNode }) {
  return (
    <ThemeProvider attribute="class" defaultTheme="system" enableSystem>
      <div data-theme={providerProps.theme}>{children}</div>
    </ThemeProvider>
  )
}
"""

_DOCS_LAYOUT = """\
import { components, siteConfig } from '@/lib/site-config'
import { getNavTree } from '@/lib/navigation'

export default function DocsLayout({ children }: { children: React.ReactNode }) {
  const { Header, Sidebar } = components
  const tree = getNavTree()

  return (
    <>
      <Header projectName={siteConfig.name} homeUrl="/" />
      <div className="docs-grid">
        <Sidebar tree={tree} basePath={siteConfig.basePath} />
        <main>{children}</main>
      </div>
    </>
  )
}
"""

_DOC_PAGE = """\
import { notFound } from 'next/navigation'
import { getAllDocSlugs, getDocBySlug } from '@/lib/docs'
import { DocContent } from './content'

interface PageProps {
  params: { slug: string[] }
}

export async function generateStaticParams() {
  return getAllDocSlugs().map((slug) => ({ slug: [slug] }))
}

export default async function DocPage({ params }: PageProps) {
  const doc = getDocBySlug(params.slug.join('/'))
  if (!doc) notFound()
  return <DocContent doc={doc} />
}
"""

_DOC_CONTENT = """\
'use client'

import { components } from '@/lib/site-config'
import type { DocData } from '@/lib/docs'

export function DocContent({ doc }: { doc: DocData }) {
  const { MarkdownContent, TableOfContents } = components

  return (
    <div className="doc-with-toc">
      <article>
        <h1>{doc.title}</h1>
        {doc.description && <p className="lead">{doc.description}</p>}
        <MarkdownContent content={doc.content} />
      </article>
      <TableOfContents markdown={doc.content} />
    </div>
  )
}
"""

_DOCS_LIB = """\
import fs from 'fs'
import path from 'path'
import matter from 'gray-matter'

const DOCS_DIR = path.join(process.cwd(), 'docs')

export interface DocData {
  slug: string
  title: string
  description?: string
  content: string
}

export function getDocBySlug(slug: string): DocData | null {
  const file = path.join(DOCS_DIR, `${slug}.md`)
  if (!fs.existsSync(file)) return null
  const { data, content } = matter(fs.readFileSync(file, 'utf-8'))
  return {
    slug,
    title: (data.title as string) ?? slug,
    description: data.description as string | undefined,
    content,
  }
}

export function getAllDocSlugs(): string[] {
  if (!fs.existsSync(DOCS_DIR)) return []
  return fs
    .readdirSync(DOCS_DIR)
    .filter((f) => f.endsWith('.md'))
    .map((f) => f.replace(/\\.md$/, ''))
}
"""

_NAVIGATION_LIB = """\
import docs from '../../docs.json'

export interface PageNode {
  type: 'folder' | 'page'
  name: string
  url?: string
  children?: PageNode[]
}

interface DocsJson {
  name: string
  groups: { id: string; title: string; items: { id: string; title: string }[] }[]
}

export function getNavTree(): PageNode[] {
  const { groups = [] } = docs as DocsJson
  return groups.map((group) => ({
    type: 'folder',
    name: group.title,
    children: group.items.map((item) => ({
      type: 'page',
      name: item.title,
      url: `/docs/${item.id}`,
    })),
  }))
}
"""


_DEFAULT_COMPONENTS = """\
'use client'

import Link from 'next/link'
import ReactMarkdown from 'react-markdown'
import { useTheme } from 'next-themes'
import type { PageNode } from '@/lib/navigation'

export interface HeaderProps {
  projectName: string
  homeUrl?: string
  showThemeToggle?: boolean
}

export function Header({ projectName, homeUrl = '/', showThemeToggle = true }: HeaderProps) {
  const { resolvedTheme, setTheme } = useTheme()
  return (
    <header className="site-header">
      <Link href={homeUrl}>{projectName}</Link>
      {showThemeToggle && (
        <button onClick={() => setTheme(resolvedTheme === 'dark' ? 'light' : 'dark')}>
          Toggle theme
        </button>
      )}
    </header>
  )
}

export interface SidebarProps {
  tree: PageNode[]
  currentPage?: string
  projectName?: string
  basePath?: string
}

export function Sidebar({ tree, currentPage }: SidebarProps) {
  return (
    <nav className="sidebar">
      {tree.map((group) => (
        <section key={group.name}>
          <h2>{group.name}</h2>
          <ul>
            {(group.children ?? []).map((page) => (
              <li key={page.url} className={page.url === currentPage ? 'active' : undefined}>
                <Link href={page.url ?? '#'}>{page.name}</Link>
              </li>
            ))}
          </ul>
        </section>
      ))}
    </nav>
  )
}

export interface TableOfContentsProps {
  items?: { id: string; text: string; level: number }[]
  title?: string
  markdown?: string
}

function headingsOf(markdown: string) {
  return markdown
    .split('\\n')
    .map((line) => /^(#{2,3})\\s+(.+)$/.exec(line))
    .filter((m): m is RegExpExecArray => m !== null)
    .map((m) => ({
      id: m[2].toLowerCase().replace(/[^a-z0-9]+/g, '-'),
      text: m[2],
      level: m[1].length,
    }))
}

export function TableOfContents({ items, title = 'On this page', markdown = '' }: TableOfContentsProps) {
  const headings = items ?? headingsOf(markdown)
  if (headings.length === 0) return null
  return (
    <aside className="toc">
      <p>{title}</p>
      <ul>
        {headings.map((h) => (
          <li key={h.id} data-level={h.level}>
            <a href={`#${h.id}`}>{h.text}</a>
          </li>
        ))}
      </ul>
    </aside>
  )
}

export interface MarkdownContentProps {
  content: string
}

export function MarkdownContent({ content }: MarkdownContentProps) {
  return (
    <div className="prose">
      <ReactMarkdown>{content}</ReactMarkdown>
    </div>
  )
}
"""


def _globals_css(args: TemplateArgs) -> str:
    theme = get_theme(args.theme)
    return (
        f"/* Theme: {theme.name} */\n"
        ":root {\n"
        f"  --color-accent: {theme.accent};\n"
        "  --color-bg: #ffffff;\n"
        "  --color-fg: #1f2328;\n"
        "  --color-border: #d1d9e0;\n"
        "}\n"
        "\n"
        ".dark {\n"
        f"  --color-accent: {theme.accent_dark};\n"
        "  --color-bg: #0d1117;\n"
        "  --color-fg: #f0f6fc;\n"
        "  --color-border: #3d444d;\n"
        "}\n"
        "\n"
        "body {\n"
        "  margin: 0;\n"
        "  background: var(--color-bg);\n"
        "  color: var(--color-fg);\n"
        "  font-family: ui-sans-serif, system-ui, sans-serif;\n"
        "}\n"
        "\n"
        ".docs-grid {\n"
        "  display: grid;\n"
        "  grid-template-columns: 16rem minmax(0, 1fr);\n"
        "  gap: 2rem;\n"
        "  max-width: 90rem;\n"
        "  margin: 0 auto;\n"
        "  padding: 2rem 1.5rem;\n"
        "}\n"
    )


def _root_layout(args: TemplateArgs) -> str:
    name = json.dumps(args.project_name, ensure_ascii=False)
    return f"""\
import type {{ Metadata }} from 'next'
import {{ Providers }} from './providers'
import './globals.css'

const SITE_NAME = {name}

export const metadata: Metadata = {{
  title: {{ default: SITE_NAME, template: `%s — ${{SITE_NAME}}` }},
}}

export default function RootLayout({{ children }}: {{ children: React.ReactNode }}) {{
  return (
    <html lang="en" suppressHydrationWarning>
      <body>
        <Providers>{{children}}</Providers>
      </body>
    </html>
  )
}}
"""


def _home_page(args: TemplateArgs) -> str:
    target = json.dumps(f"/docs/{args.default_page}", ensure_ascii=False)
    return f"""\
import {{ redirect }} from 'next/navigation'

export default function Home() {{
  redirect({target})
}}
"""


def _site_config(args: TemplateArgs) -> str:
    name = json.dumps(args.project_name, ensure_ascii=False)
    page = json.dumps(args.default_page, ensure_ascii=False)
    theme = json.dumps(args.theme)
    return f"""\
import {{
  Header as DefaultHeader,
  Sidebar as DefaultSidebar,
  TableOfContents as DefaultTableOfContents,
  MarkdownContent as DefaultMarkdownContent,
}} from '@/components/defaults'

// ─── Component Overrides ─────────────────────────────────────
// Swap any component with your own. Run `docforge eject <name>`
// to scaffold a starter override.
export const components = {{
  Header: DefaultHeader,
  Sidebar: DefaultSidebar,
  TableOfContents: DefaultTableOfContents,
  MarkdownContent: DefaultMarkdownContent,
}}

// ─── Site Config ─────────────────────────────────────────────
export const siteConfig = {{
  name: {name},
  defaultPage: {page},
  basePath: '/docs',
}}

// ─── Provider Config ─────────────────────────────────────────
export const providerProps = {{
  theme: {theme},
}}
"""


def _package_json(args: TemplateArgs) -> str:
    return json.dumps(
        {
            "name": args.project_name,
            "version": "0.1.0",
            "private": True,
            "scripts": {
                "dev": "next dev",
                "build": "next build",
                "start": "next start",
                "lint": "next lint",
            },
            "dependencies": {
                "gray-matter": "^4.0.3",
                "next": "^14.2.0",
                "next-themes": "^0.3.0",
                "react": "^18.3.0",
                "react-dom": "^18.3.0",
                "react-markdown": "^9.0.0",
            },
            "devDependencies": {
                "@types/node": "^20.0.0",
                "@types/react": "^18.3.0",
                "@types/react-dom": "^18.3.0",
                "typescript": "^5.5.0",
            },
        },
        indent=2,
    ) + "\n"


_GITIGNORE = """\
# Dependencies
node_modules
.pnpm-store

# Next.js
.next
out

# docforge
.docforge-backup
.docforge.lock

# Misc
.DS_Store
*.log
"""


_ACCENT_RE = re.compile(r"--color-accent:\s*(#[0-9a-fA-F]{3,8})\s*;")
_SITE_NAME_RE = re.compile(r"^const SITE_NAME = (\".*\")\s*$", re.MULTILINE)
_REDIRECT_RE = re.compile(r"redirect\((\"/docs/.*\")\)")


def _json_string(raw: str | None) -> str | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, str) and value else None


class NextjsTemplate(TemplateProvider):
    """Next.js App Router docs site."""

    variant = TemplateVariant.NEXTJS
    label = "Next.js"
    dev_url = "http://localhost:3000/docs/"

    owned_files = (
        "next.config.js",
        "tsconfig.json",
        "src/app/layout.tsx",
        "src/app/globals.css",
        "src/app/providers.tsx",
        "src/app/page.tsx",
        "src/app/docs/layout.tsx",
        "src/app/docs/[...slug]/page.tsx",
        "src/app/docs/[...slug]/content.tsx",
        "src/lib/docs.ts",
        "src/lib/navigation.ts",
        "src/components/defaults.tsx",
    )
    consumer_files = ("package.json", ".gitignore", "docs.json", SITE_CONFIG)
    marker_files = ("next.config.js", SITE_CONFIG)

    templates = {
        "next.config.js": static_template(_NEXT_CONFIG),
        "tsconfig.json": static_template(_TSCONFIG),
        "src/app/layout.tsx": _root_layout,
        "src/app/globals.css": _globals_css,
        "src/app/providers.tsx": static_template(_PROVIDERS),
        "src/app/page.tsx": _home_page,
        "src/app/docs/layout.tsx": static_template(_DOCS_LAYOUT),
        "src/app/docs/[...slug]/page.tsx": static_template(_DOC_PAGE),
        "src/app/docs/[...slug]/content.tsx": static_template(_DOC_CONTENT),
        "src/lib/docs.ts": static_template(_DOCS_LIB),
        "src/lib/navigation.ts": static_template(_NAVIGATION_LIB),
        "src/components/defaults.tsx": static_template(_DEFAULT_COMPONENTS),
    }
    consumer_templates = {
        "package.json": _package_json,
        ".gitignore": static_template(_GITIGNORE),
        SITE_CONFIG: _site_config,
    }

    def infer_args(self, directory: Path) -> TemplateArgs:
        css = read_text_or_none(directory / "src/app/globals.css")
        accent = search_group(_ACCENT_RE, css)
        theme = theme_for_accent(accent) if accent else None
        if theme is None:
            logger.info("Could not infer theme from globals.css — using default")

        layout = read_text_or_none(directory / "src/app/layout.tsx")
        project_name = _json_string(search_group(_SITE_NAME_RE, layout)) or DEFAULT_PROJECT_NAME

        home = read_text_or_none(directory / "src/app/page.tsx")
        target = _json_string(search_group(_REDIRECT_RE, home))
        default_page = target.removeprefix("/docs/") if target else ""

        return TemplateArgs(
            project_name=project_name,
            theme=theme,
            default_page=default_page or DEFAULT_PAGE,
        )
