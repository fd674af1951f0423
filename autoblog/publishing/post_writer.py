"""Post directory assembly: content.md, metadata.json and the site page stub."""

from __future__ import annotations

import json
import os
from typing import Any, Dict

POSTS_DIRNAME = "posts"
ASSETS_SUBDIR = os.path.join("assets", "images")

REQUIRED_POST_FILES = ("content.md", "metadata.json", "index.tsx")

_PAGE_STUB = """import fs from 'fs';
import path from 'path';
import {{ marked }} from 'marked';
import {{ GetStaticProps }} from 'next';

export default function BlogPost({{ content, metadata }}) {{
  return (
    <div className="max-w-4xl mx-auto px-4 py-8">
      <img
        src={{metadata.image}}
        alt={{metadata.title}}
        className="w-full h-64 object-cover rounded-lg mb-8"
      />
      <h1 className="text-4xl font-bold mb-4">{{metadata.title}}</h1>
      <p className="text-gray-600 mb-6">{{metadata.description}}</p>
      <div className="flex gap-4 text-sm text-gray-500 mb-8">
        <span>{{metadata.date}}</span>
        <span>{{metadata.readingTime}}</span>
      </div>
      <div
        className="prose max-w-none"
        dangerouslySetInnerHTML={{{{ __html: content }}}}
      />
    </div>
  );
}}

export const getStaticProps: GetStaticProps = async () => {{
  const contentPath = path.join(process.cwd(), 'posts', '{folder}', 'content.md');
  const metadataPath = path.join(process.cwd(), 'posts', '{folder}', 'metadata.json');

  const contentFile = fs.readFileSync(contentPath, 'utf-8');
  const metadataFile = fs.readFileSync(metadataPath, 'utf-8');

  const content = marked(contentFile);
  const metadata = JSON.parse(metadataFile);

  return {{
    props: {{
      content,
      metadata,
    }},
  }};
}};
"""


def render_page_stub(folder_name: str) -> str:
    return _PAGE_STUB.format(folder=folder_name)


def render_content(title: str, draft: str) -> str:
    return f"# {title}\n\n{draft}"


def write_post_files(post_dir: str, *, title: str, draft: str, metadata: Dict[str, Any], folder_name: str) -> None:
    os.makedirs(post_dir, exist_ok=True)
    with open(os.path.join(post_dir, "metadata.json"), "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2, ensure_ascii=False)
    with open(os.path.join(post_dir, "content.md"), "w", encoding="utf-8") as f:
        f.write(render_content(title, draft))
    with open(os.path.join(post_dir, "index.tsx"), "w", encoding="utf-8") as f:
        f.write(render_page_stub(folder_name))


def missing_post_files(post_dir: str, image_path: str) -> list:
    """Names of expected post artifacts that are absent (empty list means complete)."""
    missing = [name for name in REQUIRED_POST_FILES if not os.path.isfile(os.path.join(post_dir, name))]
    if not os.path.isfile(image_path) or os.path.getsize(image_path) == 0:
        missing.append(os.path.basename(image_path))
    return missing
