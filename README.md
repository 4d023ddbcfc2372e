# gitbase

Building blocks for running SQL queries over git repositories, as a plain
Python library with no third-party dependencies.

## Modules

- `gitbase.expression`: a small expression tree. `Expression` is the base
  class with `eval(row)` and `children()`; the nodes are `Literal`,
  `GetField` (column index, name and optional table), `UnresolvedColumn`,
  `Tuple`, `Equals`, `GreaterThan`, `In` and `And`, with SQL NULL handling
  (`None`). `inspect(expr, fn)` walks a tree depth first and `join_and(*args)`
  folds several expressions into one `And`.
- `gitbase.filters`: filter pushdown for a table.
  - `Column(name, source)` describes a schema column; `schema_contains`
    looks one up, ignoring case.
  - `handled_filters` keeps the filters that reference no column of another
    table.
  - `can_handle_equals` / `can_handle_in` tell whether a filter compares a
    column of the table with literals; `get_equality_values` and
    `get_in_values` pull out the column name and values.
  - `classify_filters(schema, table, filters, *columns)` splits filters into
    a `Selectors` mapping (column name to lists of OR'd values) and the
    remaining conditions. `Selectors.is_valid` checks that all selectors of a
    column agree; `Selectors.text_values` returns their values as strings
    (empty when missing or conflicting), converted with `to_text`.
  - `row_iter_with_selectors` calls your builder with the selectors and
    filters the rows it yields with the remaining conditions.
- `gitbase.index`: a compact binary encoding for index keys.
  - `write_int64`/`read_int64` (zig-zag, little endian), `write_string`/
    `read_string` (length prefixed), `write_bool`/`read_bool` and
    `write_hash`/`read_hash` (40-character hex hashes; a wrong length raises
    `InvalidHashSizeError`) work on binary streams.
  - `PackOffsetIndexKey(repository, packfile, offset=-1, hash="")` stores
    either a packfile offset or an object hash; `encode()` and the class
    method `decode(data)` convert it to and from bytes.
  - `encode_index_key(key)` and `decode_index_key(data, key_type)` add zlib
    compression on top.
  - `row_index_values(row, columns, schema)` picks column values out of a
    row, raising `ColumnNotFoundError` for unknown columns.
  - `RowIndexIter(index, to_row)` turns index values into rows and closes
    the index if decoding fails; it is also a context manager.
- `gitbase.commitstats`: line statistics of changes.
  - `LineKind` (CODE, COMMENT, BLANK, OTHER), `KindStats` (additions and
    deletions, combined with `add`), `LineInfo` and `FileStats` (line text to
    its count and kind, with `add` and `sub`).
  - `file_stats_from_text` counts every line of plain text as OTHER;
    `diff_file_stats(src, dst)` gives the per-line difference of two versions.
  - `commit_file_stats_from_file_stats` summarises one file into a
    `CommitFileStats` (passing `None` marks a binary file with no counts);
    `commit_stats_from_file_stats` adds files up into a `CommitStats`, whose
    `str()` is a short human-readable report.
- `gitbase.refnames`: `is_remote_ref` and `is_tag_ref`, and the `IsRemote`
  and `IsTag` expressions that apply them to a row value. NULL gives
  `False`; a non-string raises `InvalidTypeError`.
- `gitbase.hashing`: cache keys.
  - `filename_hash`, `blob_hash` and `language_hash` build the 64-bit
    CRC-32 key of a file name and content.
  - `crc64_iso` and `compute_key(mode, lang, blob)` build the CRC-64 (ISO)
    key of a parse request.
  - `language_cache_size()` reads `GITBASE_LANGUAGE_CACHE_SIZE` from the
    environment, defaulting to 10000.
  - `expr_to_string(expr, row)` evaluates an expression as text, giving
    `""` for a missing expression or NULL.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from gitbase.expression import Equals, GetField, Literal
from gitbase.filters import Column, classify_filters
from gitbase.index import PackOffsetIndexKey, encode_index_key, decode_index_key

schema = [Column("a", "foo"), Column("b", "foo")]
flt = Equals(GetField(0, "a", table="foo"), Literal(1))
selectors, rest = classify_filters(schema, "foo", [flt], "a")
print(selectors.text_values("a"))   # ['1']

key = PackOffsetIndexKey("repo1", "0" * 40, 1234)
data = encode_index_key(key)
assert decode_index_key(data, PackOffsetIndexKey) == key
```

## What it does not do

This is a library of parts, not a query engine. It has no SQL parser, no
server and no command-line program. It does not open git repositories,
read commits or compute tree diffs: commit statistics are built from text
and line counts you supply. It does not detect programming languages,
classify lines as code or comments, or parse source code into syntax trees;
`gitbase.hashing` only computes the keys under which such results would be
cached.