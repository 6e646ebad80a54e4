# repofetch

repofetch is a library for gathering facts about a Git repository and
presenting them in a terminal: who wrote it, which files change most, how many
commits it has, what its package manifest says, and a block of colourised
ASCII art or an inline image to go beside them.

History is read by running the `git` executable, which must be on `PATH`.

## Modules

- `repofetch.git`: `traverse_commit_graph(repo_path, no_bots, max_churn_pool_size, no_merges)`
  walks the ancestors of HEAD (newest first, with mailmapped authors) and
  returns a `GitMetrics` with commit counts per author (`Sig`) and per file,
  the churn pool size, and the times of the first and most recent commits in
  seconds since the epoch. Merge commits can be skipped and bot authors
  filtered out with a `BotRegex`. Failures raise `GitError`.
- `repofetch.authors`: `AuthorsInfo.from_counts(...)` ranks authors by commit
  count, then name, and renders lines such as `75% Jane Doe <jane@example.com> 1500`.
- `repofetch.churn`: `ChurnInfo.from_counts(...)` lists the most frequently
  changed files, skipping paths that match any of the given globs
  (`*`, `?`, `**`, `[...]`, `{a,b}`); long paths are shortened to their last
  two components.
- `repofetch.commits`, `repofetch.contributors`, `repofetch.created`,
  `repofetch.head`, `repofetch.dependencies`, `repofetch.description`: the
  remaining info lines. Each info class has `title()`, `value()` and
  `serialize()`. `HeadInfo.from_repo(path)` shows the short HEAD id with its
  branch and push-tracking branch. `CreatedInfo` holds a date string that the
  caller has already formatted.
- `repofetch.manifest`: `get_manifests(path)` reads `Cargo.toml` and
  `package.json` files found directly in a directory; unparsable files are
  skipped.
- `repofetch.config`: `NumberSeparator` (plain, comma, space, underscore),
  `format_number`, and the TOML `Configuration` with `read_cfg`, `load_cfg`
  and `write_default_cfg`. Called without a path, `load_cfg` reads
  `repofetch/config.toml` from the user's configuration directory; if that
  file does not exist it writes a default one and raises `FileNotFoundError`
  naming it.
- `repofetch.ascii_art`: `AsciiArt` renders templates whose `{0}`–`{9}`
  markers switch colour, trimming every line to the art's true width.
- `repofetch.terminal_image`: `KittyBackend`, `ITermBackend` and
  `SixelBackend` produce the escape sequences that draw a Pillow image with
  lines of text beside it; `get_best_backend()` probes the terminal and
  `get_image_backend(ImageProtocol(...))` picks one by name.
- `repofetch.templating`: `strip_color_tokens` and `hex_to_rgb` helpers for
  language templates.
- `repofetch.cli`: `parse_options(argv)` parses command-line style arguments
  into a `CliOptions` value and raises `CliError` on invalid input; also
  `is_truecolor_terminal()`, `get_git_version()` and
  `print_supported_package_managers()`.

## Examples

Reading the manifests in a directory:

```python
from repofetch.manifest import get_manifests

for manifest in get_manifests("path/to/project"):
    print(manifest.manifest_type, manifest.name, manifest.version)
```

Summarising who wrote a repository:

```python
from repofetch.authors import AuthorsInfo
from repofetch.config import NumberSeparator
from repofetch.git import traverse_commit_graph

metrics = traverse_commit_graph("path/to/repo", None, None, False)
authors = AuthorsInfo.from_counts(
    metrics.number_of_commits_by_signature,
    metrics.total_number_of_commits,
    3,
    False,
    NumberSeparator.COMMA,
    1,
)
print(f"{authors.title()}: {authors.value()}")
```

Rendering an ASCII template:

```python
from repofetch.ascii_art import AnsiColor, AsciiArt

colors = [AnsiColor.BLUE, AnsiColor.BRIGHT_RED]
art = AsciiArt("{0}  /\\\n{1} /  \\\n{0}/____\\", colors, True)
for line in art:
    print(line)
```

Parsing options:

```python
from repofetch.cli import parse_options

options = parse_options(["path/to/repo", "--number-of-authors", "4", "--no-bots"])
print(options.info.number_of_authors, options.info.no_bots.pattern)
```

## What it does not do

- There is no installed command; the pieces are meant to be called from
  Python. `parse_options` only parses arguments, and nothing in the package
  acts on options such as `--output`, `--generate`, `--languages` or
  `--ascii-language`.
- It does not detect or count programming languages, and ships no ASCII art
  for them.
- It does not print a finished summary screen or serialise one to JSON or
  YAML; each info class only offers its own `title()`, `value()` and
  `serialize()`.
- It does not format commit times into dates; `GitMetrics` gives epoch
  seconds and `CreatedInfo` takes a ready-made string.