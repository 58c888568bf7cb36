"""Tests for the RST to Markdown converter."""

from frc_docs_mcp.scraper.rst import convert_inline, rst_to_markdown


class TestHeadings:
	"""Section titles."""

	def test_underlined_title_levels(self):
		"""Underline characters map to heading levels."""
		rst = "Top\n===\n\nSub\n---\n\nSubsub\n~~~~~~\n\nDeep\n^^^^\n"
		assert rst_to_markdown(rst) == "# Top\n\n## Sub\n\n### Subsub\n\n#### Deep"

	def test_title_with_inline_text_after(self):
		"""Body text following a title gets inline conversion."""
		rst = "PID Basics\n==========\n\nSome ``code`` text.\n"
		assert rst_to_markdown(rst) == "# PID Basics\n\nSome `code` text."

	def test_short_underline_is_not_a_title(self):
		"""An underline shorter than the title leaves both lines as text."""
		result = rst_to_markdown("A long title here\n===\n")
		assert not result.startswith("#")
		assert "A long title here" in result

	def test_overline_title(self):
		"""Overline plus underline produces a top-level heading."""
		assert rst_to_markdown("=====\nIntro\n=====\n\nBody.") == "# Intro\n\nBody."

	def test_indented_line_is_not_a_title(self):
		"""Indented text above an underline-like line is not a heading."""
		result = rst_to_markdown("   indented\n----------\n")
		assert "# " not in result


class TestDirectives:
	"""Block directives."""

	def test_admonition_becomes_blockquote(self):
		"""Admonition body is folded into a labelled blockquote."""
		rst = (
			".. note:: This is important.\n"
			"   Second line with :guilabel:`OK`.\n"
			"\n"
			"After.\n"
		)
		assert rst_to_markdown(rst) == "> **Note:** This is important. Second line with **OK**.\n\nAfter."

	def test_warning_admonition_label(self):
		"""Admonition labels are capitalised from the directive name."""
		result = rst_to_markdown(".. WARNING::\n\n   Do not unplug the roboRIO.\n")
		assert result == "> **Warning:** Do not unplug the roboRIO."

	def test_code_block_is_fenced_and_dedented(self):
		"""Code blocks keep relative indentation and end at unindented text."""
		rst = (
			".. code-block:: java\n"
			"   :linenos:\n"
			"\n"
			"   int x = 1;\n"
			"   if (x) {\n"
			"       y();\n"
			"   }\n"
			"\n"
			"Done.\n"
		)
		assert rst_to_markdown(rst) == "```java\nint x = 1;\nif (x) {\n    y();\n}\n```\n\nDone."

	def test_code_block_keeps_internal_blank_lines(self):
		"""A blank line followed by more indented code stays inside the block."""
		rst = ".. code-block:: python\n\n   a = 1\n\n   b = 2\n"
		assert rst_to_markdown(rst) == "```python\na = 1\n\nb = 2\n```"

	def test_image_with_alt(self):
		"""Images become Markdown images with their alt text."""
		rst = ".. image:: images/robot.png\n   :alt: A robot\n"
		assert rst_to_markdown(rst) == "![A robot](images/robot.png)"

	def test_figure_drops_caption(self):
		"""Figures keep source and alt but not the caption."""
		rst = (
			".. figure:: images/field.png\n"
			"   :alt: Field layout\n"
			"\n"
			"   The caption text.\n"
			"\n"
			"Next.\n"
		)
		result = rst_to_markdown(rst)
		assert result.startswith("![Field layout](images/field.png)")
		assert "caption" not in result
		assert result.endswith("Next.")

	def test_tab_set_items_are_labelled(self):
		"""Each tab item becomes a bold label followed by its body."""
		rst = (
			".. tab-set::\n"
			"\n"
			"   .. tab-item:: Java\n"
			"      :sync: java\n"
			"\n"
			"      Java text.\n"
			"\n"
			"   .. tab-item:: C++\n"
			"      :sync: cpp\n"
			"\n"
			"      C++ text.\n"
		)
		assert rst_to_markdown(rst) == "**Java:**\nJava text.\n\n**C++:**\nC++ text."

	def test_tab_set_code_contains_code_blocks(self):
		"""Code blocks nested in tab-set-code are converted."""
		rst = (
			".. tab-set-code::\n"
			"\n"
			"   .. code-block:: java\n"
			"\n"
			"      int x = 1;\n"
			"\n"
			"   .. code-block:: python\n"
			"\n"
			"      x = 1\n"
		)
		assert rst_to_markdown(rst) == "```java\nint x = 1;\n```\n\n```python\nx = 1\n```"

	def test_remote_literal_include_becomes_link(self):
		"""Remote includes become a source link labelled with the language."""
		rst = (
			".. remoteliteralinclude:: https://github.com/wpilibsuite/allwpilib/Robot.java\n"
			"   :language: java\n"
			"   :lines: 1-10\n"
		)
		assert rst_to_markdown(rst) == "*See source: [java](https://github.com/wpilibsuite/allwpilib/Robot.java)*"

	def test_remote_literal_include_without_language(self):
		"""Missing language falls back to a generic label."""
		result = rst_to_markdown(".. remoteliteralinclude:: https://example.com/a.py\n")
		assert result == "*See source: [code](https://example.com/a.py)*"

	def test_include_and_orphan_are_dropped(self):
		"""include directives and :orphan: markers produce no output."""
		result = rst_to_markdown(":orphan:\n\n.. include:: header.rst\n\nText.\n")
		assert result == "Text."

	def test_unknown_directive_dropped_but_body_kept(self):
		"""Unknown directives and their options vanish; body text survives."""
		rst = ".. toctree::\n   :maxdepth: 1\n\n   intro\n"
		result = rst_to_markdown(rst)
		assert "toctree" not in result
		assert "maxdepth" not in result
		assert "intro" in result


class TestInline:
	"""Inline roles and literals."""

	def test_ref_with_display_text(self):
		"""Paired refs keep only their display text."""
		assert convert_inline("See :ref:`PID docs <docs/pid:PID>` now") == "See PID docs now"

	def test_bare_ref(self):
		"""Bare refs keep their target text."""
		assert convert_inline(":ref:`installation`") == "installation"

	def test_doc_role(self):
		"""doc roles keep the label when present, else the path."""
		assert convert_inline(":doc:`Install <install>`") == "Install"
		assert convert_inline(":doc:`/docs/index`") == "/docs/index"

	def test_term_role_is_emphasised(self):
		"""Glossary terms become italics."""
		assert convert_inline(":term:`CAN`") == "*CAN*"

	def test_external_roles(self):
		"""External roles become plain text when paired and code when bare."""
		assert convert_inline(":external:py:class:`Foo <wpilib.Foo>`") == "Foo"
		assert convert_inline(":external:java:ref:`Bar`") == "`Bar`"

	def test_qualified_external_roles_are_not_split(self):
		"""ref, doc and term inside a qualified external role stay whole."""
		assert convert_inline(":external:py:ref:`Timed Robot`") == "`Timed Robot`"
		assert convert_inline(":external:std:doc:`Intro <intro>`") == "Intro"
		assert convert_inline(":external:std:term:`PID`") == "`PID`"
		assert convert_inline("See :ref:`drive` and :external:java:ref:`Bar`.") == "See drive and `Bar`."

	def test_ui_roles_are_bold(self):
		"""guilabel and menuselection render bold."""
		assert convert_inline(":menuselection:`File --> Open`") == "**File --> Open**"
		assert convert_inline(":guilabel:`Deploy`") == "**Deploy**"

	def test_file_and_command_roles_are_code(self):
		"""file and command roles render as inline code."""
		assert convert_inline(":file:`build.gradle` and :command:`gradlew`") == "`build.gradle` and `gradlew`"

	def test_double_backticks_and_substitutions(self):
		"""Inline literals collapse to single backticks; |reg| becomes the symbol."""
		assert convert_inline("``Timer`` in FIRST|reg|") == "`Timer` in FIRST®"

	def test_escaped_whitespace(self):
		"""Backslash-escaped whitespace collapses to one space."""
		assert convert_inline("foo\\ bar") == "foo bar"


class TestTotality:
	"""The converter accepts any input."""

	def test_empty_input(self):
		"""Empty input produces empty output."""
		assert rst_to_markdown("") == ""

	def test_blank_runs_are_collapsed(self):
		"""Output never has three consecutive newlines."""
		result = rst_to_markdown("a\n\n\n\n\nb\n")
		assert result == "a\n\nb"

	def test_no_trailing_whitespace_on_lines(self):
		"""Every output line is right-stripped."""
		result = rst_to_markdown("Text with spaces   \n\n.. note:: hi   \n")
		assert all(line == line.rstrip() for line in result.split("\n"))

	def test_dangling_directives_do_not_raise(self):
		"""Directives at end of input with no body still convert."""
		result = rst_to_markdown(".. code-block:: c\n")
		assert result == "```c\n```"
		assert rst_to_markdown(".. tab-set::\n") == ""
		assert rst_to_markdown(".. image:: a.png") == "![](a.png)"
