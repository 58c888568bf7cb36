"""
reStructuredText to Markdown conversion.

Handles the Sphinx/MyST flavoured RST used by frc-docs: section titles,
admonitions, images and figures, sphinx-design tab sets, remote literal
includes, code blocks, and the common inline roles. Unknown directives are
dropped (their body text is kept). The converter never raises.
"""

import re
import textwrap
from typing import Callable, Optional

ADMONITIONS = ("note", "warning", "important", "tip", "caution", "danger", "todo", "seealso")

_UNDERLINE = re.compile(r"^([=\-~^\"])\1{2,}$")
_HEADING_LEVELS = {"=": 1, "-": 2, "~": 3}

_SKIP = re.compile(r"^(\.\.\s+include::|:orphan:)")
_ADMONITION = re.compile(r"^\.\.\s+(" + "|".join(ADMONITIONS) + r")::\s*(.*)", re.IGNORECASE)
_IMAGE = re.compile(r"^\.\.\s+image::\s+(.*)")
_FIGURE = re.compile(r"^\.\.\s+figure::\s+(.*)")
_TAB_SET_CODE = re.compile(r"^\.\.\s+tab-set-code::")
_TAB_SET = re.compile(r"^\.\.\s+tab-set::")
_TAB_ITEM = re.compile(r"^\s{3,}\.\.\s+tab-item::\s*(.*)")
_REMOTE_INCLUDE = re.compile(r"^\s*\.\.\s+remoteliteralinclude::\s+(.*)")
_CODE_BLOCK = re.compile(r"^\.\.\s+code-block::\s*(.*)")
_ANY_DIRECTIVE = re.compile(r"^\.\.\s+[\w-]+::")

_INDENT3 = re.compile(r"^\s{3,}")
_OPTION3 = re.compile(r"^\s{3,}:")
_OPTION6 = re.compile(r"^\s{6,}:")
_INDENT6 = re.compile(r"^\s{6,}")
_INDENT2 = re.compile(r"^\s{2,}")
_ALT = re.compile(r":alt:\s*(.*)")
_LANGUAGE = re.compile(r":language:\s*(.*)")

# Applied in order; later patterns must not re-match converted text.
_INLINE_RULES: list[tuple[re.Pattern, Callable[[re.Match], str] | str]] = [
	(re.compile(r"(?<![\w:]):ref:`([^<`]+)<[^>]+>`"), lambda m: m.group(1).rstrip()),
	(re.compile(r"(?<![\w:]):ref:`([^`]+)`"), r"\1"),
	(re.compile(r"(?<![\w:]):doc:`([^<`]+?)\s*(?:<[^>]+>)?`"), r"\1"),
	(re.compile(r"(?<![\w:]):term:`([^`]+)`"), r"*\1*"),
	(re.compile(r":external:[^`]+`([^<`]+)<[^>]+>`"), lambda m: m.group(1).rstrip()),
	(re.compile(r":external:[^`]+`([^`]+)`"), r"`\1`"),
	(re.compile(r":guilabel:`([^`]+)`"), r"**\1**"),
	(re.compile(r":menuselection:`([^`]+)`"), r"**\1**"),
	(re.compile(r":file:`([^`]+)`"), r"`\1`"),
	(re.compile(r":command:`([^`]+)`"), r"`\1`"),
	(re.compile(r"``([^`]+)``"), r"`\1`"),
	(re.compile(r"\|reg\|"), "®"),
	(re.compile(r"\\\s+"), " "),
]


def rst_to_markdown(rst: str) -> str:
	"""Convert RST source text to Markdown."""
	out = [line.rstrip() for line in _convert(rst.splitlines())]
	return re.sub(r"\n{3,}", "\n\n", "\n".join(out)).strip()


def convert_inline(line: str) -> str:
	"""Apply inline role and literal substitutions to a single line."""
	for pattern, replacement in _INLINE_RULES:
		line = pattern.sub(replacement, line)
	return line


def _convert(lines: list[str]) -> list[str]:
	"""Scan lines with a cursor, dispatching to the first matching handler."""
	out: list[str] = []
	i = 0
	while i < len(lines):
		for handler in _HANDLERS:
			next_i = handler(lines, i, out)
			if next_i is not None:
				i = next_i
				break
		else:
			out.append(convert_inline(lines[i]))
			i += 1
	return out


def _skip_blank(lines: list[str], i: int) -> int:
	while i < len(lines) and not lines[i].strip():
		i += 1
	return i


def _dedent(block: list[str]) -> list[str]:
	return textwrap.dedent("\n".join(block)).split("\n")


def _handle_skipped(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	if _SKIP.match(lines[i]):
		return i + 1
	return None


def _handle_title(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	line = lines[i]
	if i + 1 >= len(lines) or not lines[i + 1]:
		return None
	underline = _UNDERLINE.match(lines[i + 1])
	title = line.strip()
	if (
		not underline
		or not title
		or line.startswith((" ", "\t", "."))
		or _UNDERLINE.match(line)
		or len(lines[i + 1]) < len(title)
	):
		return None
	level = _HEADING_LEVELS.get(underline.group(1), 4)
	out.append(f"{'#' * level} {title}")
	return i + 2


def _handle_overline_title(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	if (
		i + 2 < len(lines)
		and _UNDERLINE.match(lines[i])
		and _UNDERLINE.match(lines[i + 2])
		and lines[i + 1].strip()
	):
		out.append(f"# {lines[i + 1].strip()}")
		return i + 3
	return None


def _handle_admonition(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	match = _ADMONITION.match(lines[i])
	if not match:
		return None
	label = match.group(1).lower().capitalize()
	body: list[str] = []
	if match.group(2).strip():
		body.append(convert_inline(match.group(2).strip()))

	i += 1
	while i < len(lines) and (_INDENT3.match(lines[i]) or not lines[i].strip()):
		if lines[i].strip():
			body.append(convert_inline(lines[i].strip()))
		elif body:
			body.append("")
		i += 1

	out.extend(["", f"> **{label}:** {' '.join(body).strip()}", ""])
	return i


def _handle_image(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	match = _IMAGE.match(lines[i])
	if not match:
		return None
	src = match.group(1).strip()
	alt = ""
	i += 1
	while i < len(lines) and _OPTION3.match(lines[i]):
		alt_match = _ALT.search(lines[i])
		if alt_match:
			alt = alt_match.group(1).strip()
		i += 1
	out.append(f"![{alt}]({src})")
	return i


def _handle_figure(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	match = _FIGURE.match(lines[i])
	if not match:
		return None
	src = match.group(1).strip()
	alt = ""
	i += 1
	# Captions and legends under the figure are discarded
	while i < len(lines) and (_INDENT3.match(lines[i]) or not lines[i].strip()):
		alt_match = _ALT.search(lines[i])
		if alt_match:
			alt = alt_match.group(1).strip()
		i += 1
	out.append(f"![{alt}]({src})")
	return i


def _handle_tab_set_code(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	if not _TAB_SET_CODE.match(lines[i]):
		return None
	i = _skip_blank(lines, i + 1)
	body: list[str] = []
	while i < len(lines) and (_INDENT2.match(lines[i]) or not lines[i].strip()):
		body.append(lines[i])
		i += 1
	out.extend(_convert(_dedent(body)))
	return i


def _handle_tab_set(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	if not _TAB_SET.match(lines[i]):
		return None
	i = _skip_blank(lines, i + 1)

	while i < len(lines):
		tab = _TAB_ITEM.match(lines[i])
		if not tab:
			break
		out.extend(["", f"**{tab.group(1).strip()}:**"])
		i += 1

		# Options like :sync:
		while i < len(lines) and _OPTION6.match(lines[i]):
			i += 1
		i = _skip_blank(lines, i)

		body: list[str] = []
		while (
			i < len(lines)
			and (_INDENT6.match(lines[i]) or not lines[i].strip())
			and not _TAB_ITEM.match(lines[i])
		):
			body.append(lines[i])
			i += 1
		out.extend(_convert(_dedent(body)))

		i = _skip_blank(lines, i)
	return i


def _handle_remote_include(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	match = _REMOTE_INCLUDE.match(lines[i])
	if not match:
		return None
	url = match.group(1).strip()
	lang = ""
	i += 1
	while i < len(lines) and _OPTION3.match(lines[i]):
		lang_match = _LANGUAGE.search(lines[i])
		if lang_match:
			lang = lang_match.group(1).strip()
		i += 1
	out.extend(["", f"*See source: [{lang or 'code'}]({url})*", ""])
	return i


def _handle_code_block(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	match = _CODE_BLOCK.match(lines[i])
	if not match:
		return None
	lang = match.group(1).strip()
	i += 1
	while i < len(lines) and _OPTION3.match(lines[i]):
		i += 1
	i = _skip_blank(lines, i)

	body: list[str] = []
	while i < len(lines) and (_INDENT3.match(lines[i]) or not lines[i].strip()):
		# A blank line followed by unindented text ends the block
		if not lines[i].strip() and i + 1 < len(lines) and not _INDENT3.match(lines[i + 1]):
			break
		body.append(lines[i])
		i += 1

	out.append(f"```{lang}")
	out.extend(_dedent(body) if body else [])
	out.append("```")
	return i


def _handle_unknown_directive(lines: list[str], i: int, out: list[str]) -> Optional[int]:
	if not _ANY_DIRECTIVE.match(lines[i]):
		return None
	i += 1
	while i < len(lines) and _OPTION3.match(lines[i]):
		i += 1
	return i


_HANDLERS: list[Callable[[list[str], int, list[str]], Optional[int]]] = [
	_handle_skipped,
	_handle_title,
	_handle_overline_title,
	_handle_admonition,
	_handle_image,
	_handle_figure,
	_handle_tab_set_code,
	_handle_tab_set,
	_handle_remote_include,
	_handle_code_block,
	_handle_unknown_directive,
]
