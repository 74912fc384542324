"""Shared hypothesis strategies for ladle property-based testing.

Provides reusable strategies at three levels:

- **Lexer**: plain text and well-formed ``{{ }}`` fragments
- **Values**: scalars and their Liquid string forms
- **Include bindings**: ``identifier: value`` argument lists

Individual test modules compose them into property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Lexer strategies
# ---------------------------------------------------------------------------

# Plain text that does NOT contain ladle delimiters (no { or })
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),
        blacklist_characters="{}\x00",
    ),
    min_size=1,
    max_size=200,
)

# Identifiers that are never keyword literals or operators
identifier = st.from_regex(r"[a-z_][a-z0-9_]{0,12}", fullmatch=True).filter(
    lambda name: name not in {"true", "false", "nil", "null", "and", "or", "contains", "in"}
)

ladle_variable = identifier.map(lambda name: f"{{{{ {name} }}}}")

# Arbitrary input that might stress the lexer (fuzz-like)
arbitrary_template_source = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

# ---------------------------------------------------------------------------
# Value strategies
# ---------------------------------------------------------------------------

safe_integer = st.integers(min_value=-10_000, max_value=10_000)

# Strings that can sit inside a single-quoted literal
quotable_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),
        blacklist_characters="'{}%\x00",
    ),
    max_size=30,
)

# (source literal, expected rendering) pairs
scalar_literal = st.one_of(
    safe_integer.map(lambda n: (str(n), str(n))),
    quotable_text.map(lambda s: (f"'{s}'", s)),
    st.sampled_from([("true", "true"), ("false", "false")]),
)

# ---------------------------------------------------------------------------
# Include binding strategies
# ---------------------------------------------------------------------------

# Non-empty list of (identifier, literal source, expected rendering) triples;
# identifiers are drawn from a small pool so duplicates are common.
include_bindings = st.lists(
    st.tuples(st.sampled_from(["a", "b", "c", "title", "path"]), scalar_literal).map(
        lambda pair: (pair[0], *pair[1])
    ),
    min_size=1,
    max_size=8,
)

# Values that are not scalars and therefore not valid partial names
non_scalar_value = st.one_of(
    st.lists(safe_integer, max_size=3),
    st.dictionaries(identifier, safe_integer, max_size=3),
    st.none(),
)
