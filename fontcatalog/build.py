#!/usr/bin/env python3
"""
fontcatalog – build.py
======================

Assemble a distributable site from the project root.

Targets
-------
- ``deploy`` (default): URL-mode catalog, chunked with
  :mod:`fontcatalog.split_fonts`, font files copied next to it. Output in
  ``dist/github-pages``.
- ``portable``: Base64-embedded ``inline-fonts-data.js``, no chunks and no
  font files. Output in ``dist/portable``.

Usage::

    python -m fontcatalog.build --target=deploy
    python -m fontcatalog.build --target=portable --skip-font-regen

The output directory is removed and recreated on every run.
"""

from __future__ import annotations

import argparse
import json
import shutil
import sys
from pathlib import Path

from fontcatalog import generate_fonts_json, split_fonts
from fontcatalog.font_faces import font_face_css

TARGETS = ("deploy", "portable")
DIST_DIRS = {"deploy": "github-pages", "portable": "portable"}
TEMPLATES = {
    "deploy": "index.template.html",
    "portable": "index-portable.template.html",
}
ASSET_DIRS = ("css", "js", "assets")
ROOT_FILES = ("LICENSE",)
GENERATED_CSS = "generated-font-classes.css"
#: Prefix that makes site-root paths resolve from the ``css/`` directory.
GENERATED_CSS_BASE = "../"

SKIP_DIRS = {".git", "node_modules"}
SKIP_FILES = {".ds_store", "thumbs.db", ".gitkeep"}


class BuildError(RuntimeError):
    """A build step failed; the output directory is not usable."""


# ============================================================
# Logging helpers
# ============================================================


class BuildLog:
    def __init__(self, target: str):
        self.prefix = f"[Build:{target}]"

    def info(self, msg: str) -> None:
        print(f"{self.prefix} {msg}")

    def warn(self, msg: str) -> None:
        print(f"{self.prefix} ⚠️  Warning: {msg}")

    def success(self, msg: str) -> None:
        print(f"{self.prefix} ✅ {msg}")

    def error(self, msg: str) -> None:
        print(f"{self.prefix} ❌ {msg}", file=sys.stderr)


# ============================================================
# Filesystem helpers
# ============================================================


def copy_dir(src: Path, dest: Path, log: BuildLog) -> None:
    """Copy ``src`` into ``dest``, skipping VCS/OS clutter and editor backups."""
    if not src.is_dir():
        log.warn(f"Source directory not found, skipping copy: {src}")
        return

    def ignore(_dir: str, names: list[str]) -> set[str]:
        return {
            n
            for n in names
            if n in SKIP_DIRS or n.lower() in SKIP_FILES or n.endswith("~")
        }

    try:
        shutil.copytree(src, dest, ignore=ignore, dirs_exist_ok=True)
    except OSError as e:
        raise BuildError(f"Failed to copy {src} to {dest}: {e}") from e


def remove_path(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


def read_inline_data(path: Path) -> tuple[list, dict | None]:
    try:
        return split_fonts.parse_inline_data(path.read_text(encoding="utf-8"))
    except (OSError, split_fonts.InlineDataError) as e:
        raise BuildError(f"Cannot read font data from {path}: {e}") from e


def first_variant(fonts: list) -> dict:
    if fonts and isinstance(fonts[0], dict):
        variants = fonts[0].get("variants") or []
        if variants and isinstance(variants[0], dict):
            return variants[0]
    return {}


# ============================================================
# Build steps
# ============================================================


def regenerate_fonts(root: Path, target: str, log: BuildLog) -> None:
    inline_js = root / generate_fonts_json.INLINE_JS
    fonts_json = root / generate_fonts_json.FONTS_JSON
    chunk_dir = root / split_fonts.CHUNK_DIR

    remove_path(inline_js)
    remove_path(fonts_json)
    if target == "deploy" and chunk_dir.exists():
        log.info(f"Cleaning root {split_fonts.CHUNK_DIR} directory...")
        remove_path(chunk_dir)

    include_base64 = target == "portable"
    log.info(f"Regenerating font assets (base64={include_base64})...")
    if generate_fonts_json.run(root, include_base64=include_base64) != 0:
        raise BuildError("Font generation failed")

    if not inline_js.is_file():
        raise BuildError(f"Font generator did not create {inline_js}")
    if not fonts_json.is_file():
        log.warn(f"Font generator did not create {fonts_json}")
    log.success("Font assets generated.")


def check_existing_fonts(root: Path, target: str, log: BuildLog) -> None:
    log.info("Skipping font regeneration.")
    required = [root / generate_fonts_json.INLINE_JS]
    if target == "deploy":
        required += [root / generate_fonts_json.FONTS_JSON, root / split_fonts.CHUNK_DIR]
    for path in required:
        if not path.exists():
            raise BuildError(f"Cannot skip font regen: required {path} is missing")


def copy_static(root: Path, dist: Path, target: str, log: BuildLog) -> None:
    template = root / TEMPLATES[target]
    if not template.is_file():
        raise BuildError(f"Required template file missing: {template}")
    shutil.copyfile(template, dist / "index.html")
    log.success(f"Copied {template.name} as index.html.")

    for name in ASSET_DIRS:
        log.info(f"Copying {name}...")
        copy_dir(root / name, dist / name, log)

    for name in ROOT_FILES:
        for candidate in (root / name, root / f"{name}.md"):
            if candidate.is_file():
                shutil.copyfile(candidate, dist / candidate.name)
                break
        else:
            log.warn(f"Root file {name}(.md) not found, skipping.")


def build_deploy(root: Path, dist: Path, log: BuildLog) -> None:
    inline_js = root / generate_fonts_json.INLINE_JS
    fonts_json = root / generate_fonts_json.FONTS_JSON
    chunk_dir = root / split_fonts.CHUNK_DIR

    fonts, metadata = read_inline_data(inline_js)
    try:
        split_fonts.check_mode(metadata)
    except split_fonts.ModeMismatchError as e:
        raise BuildError(str(e)) from e
    if not split_fonts.has_location(first_variant(fonts)):
        log.warn(f"{inline_js.name}: first variant has no URL reference")

    log.info("Running font chunking...")
    if split_fonts.run(inline_js, chunk_dir) != 0:
        raise BuildError("Font chunking failed, see messages above")

    index_path = chunk_dir / split_fonts.INDEX_JSON
    try:
        index = json.loads(index_path.read_text(encoding="utf-8"))
        sample = json.loads((chunk_dir / "g-m.json").read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise BuildError(f"Invalid chunk output in {chunk_dir}: {e}") from e
    if not isinstance(index, list) or not index:
        raise BuildError(f"{index_path} is empty or invalid")
    if not isinstance(sample, dict) or not isinstance(sample.get("fonts"), list):
        raise BuildError(f"{chunk_dir / 'g-m.json'} has an invalid structure")
    log.info(f"Chunk index looks valid ({len(index)} entries).")

    font_dir = root / generate_fonts_json.FONT_DIR_NAME
    if not font_dir.is_dir():
        raise BuildError(f"Source font directory missing: {font_dir}")
    if not fonts_json.is_file():
        raise BuildError(f"Source {fonts_json.name} missing: {fonts_json}")

    copy_dir(chunk_dir, dist / split_fonts.CHUNK_DIR, log)
    copy_dir(font_dir, dist / generate_fonts_json.FONT_DIR_NAME, log)
    shutil.copyfile(fonts_json, dist / fonts_json.name)

    css_dir = dist / "css"
    css_dir.mkdir(exist_ok=True)
    css = font_face_css(fonts, GENERATED_CSS_BASE)
    (css_dir / GENERATED_CSS).write_text(css, encoding="utf-8")
    (dist / ".nojekyll").write_text("", encoding="utf-8")
    log.success("Deploy-specific assets processed.")


def build_portable(root: Path, dist: Path, log: BuildLog) -> None:
    inline_js = root / generate_fonts_json.INLINE_JS
    if not inline_js.is_file():
        raise BuildError(f"{inline_js.name} missing for portable build")

    fonts, _metadata = read_inline_data(inline_js)
    if not str(first_variant(fonts).get("file", "")).startswith("data:"):
        log.warn(f"{inline_js.name}: first variant does not carry a data URI")

    shutil.copyfile(inline_js, dist / inline_js.name)
    log.success("Portable-specific assets processed.")


def build(root: Path, target: str = "deploy", *, skip_font_regen: bool = False) -> Path:
    """
    Run a full build for ``target`` and return the output directory.

    Raises:
        BuildError: on any failed step.
    """
    root = Path(root)
    log = BuildLog(target)
    dist = root / "dist" / DIST_DIRS[target]

    log.info(f"--- Starting Build: Target='{target}' ---")
    remove_path(dist)
    dist.mkdir(parents=True)

    if skip_font_regen:
        check_existing_fonts(root, target, log)
    else:
        regenerate_fonts(root, target, log)

    copy_static(root, dist, target, log)

    if target == "deploy":
        build_deploy(root, dist, log)
    else:
        build_portable(root, dist, log)

    log.success(f"Build succeeded for target '{target}': {dist}")
    return dist


# ============================================================
# CLI
# ============================================================


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Build the deploy or portable distribution.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--target",
        default="deploy",
        help=f"Build target, one of: {', '.join(TARGETS)}",
    )
    parser.add_argument(
        "--skip-font-regen",
        action="store_true",
        help="Reuse the existing font artifacts instead of regenerating them",
    )
    args = parser.parse_args()

    target = args.target
    if target not in TARGETS:
        print(f"⚠️  Warning: invalid target '{target}', defaulting to 'deploy'.")
        target = "deploy"

    try:
        build(Path.cwd(), target, skip_font_regen=args.skip_font_regen)
    except BuildError as e:
        BuildLog(target).error(f"Build failed for target '{target}': {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
