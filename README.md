# jsminer

jsminer scans JavaScript for things that should not be there: JWTs, API keys,
bearer tokens, passwords, e-mail addresses, IP addresses, phone numbers, file
paths and more. It reads single files, standard input, whole directories
(including `.zip` and `.jar` archives) and web pages, where it follows
`<script src>` tags and JavaScript `import` statements. It can also list the
HTTP endpoints a script refers to.

It uses only the Python standard library.

## Installation

```
pip install .
```

## Command line

```
jsminer [URL|PATH|-] [flags]
```

Targets may be URLs (`http://` or `https://`), file paths, or `-` for
standard input. Flags may come before or after the targets.

| Flag | Meaning |
|------|---------|
| `-format pretty\|json` | output format (default `json`) |
| `-safe` | safe mode: only scan JavaScript sources and stdin, and only apply the JWT rule (on by default) |
| `-allow FILE` | file of source suffixes to skip, one per line, `#` for comments |
| `-rules FILE` | extra regex rules as simple `name: pattern` YAML |
| `-endpoints` | also extract HTTP endpoints from JavaScript |
| `-external` | follow scripts and imports on other hosts (on by default) |
| `-output FILE` | write results to a file instead of stdout |
| `-quiet` | do not print the banner |
| `-targets FILE` | read targets from a file, one per line, `#` for comments |
| `-plugins NAMES` | comma-separated extra rules to enable; `entropy` is the one available |
| `-render` | accepted and ignored |
| `-h`, `-help` | print the flag list |

Safe mode is switched off with `-safe=false`, written before the targets; a
`-safe` flag after the targets always switches it on. `-external=false` (or
`-external false`) works in either position.

Examples:

```
jsminer app.js -endpoints -format pretty
cat bundle.js | jsminer - -quiet
jsminer https://example.com -endpoints -external=false
jsminer -safe=false -plugins entropy config.js
```

Unless `-quiet` is given, the banner is written before the results, in either
format. JSON output is a list of objects with `pattern`, `value` and
`severity`, plus `source` when more than one target was scanned. Pretty output
is one line per match: `[pattern] (severity) value`, prefixed with the source
when more than one target was scanned.

The command exits with status 1 when anything was found or a target could not
be scanned, 0 when nothing was found, and 2 when no target was given or the
flags could not be parsed.

A rules file looks like this:

```
# name: pattern
internal_host: 'internal\.example\.com'
```

## Library use

```python
import io
import sys

from jsminer.extractor import Extractor
from jsminer.output import Printer

extractor = Extractor(safe=True)
matches = extractor.scan_reader_with_endpoints(
    "app.js", io.StringIO('fetch("/v1/items")')
)
Printer(format="pretty", show_banner=False).print(sys.stdout, matches)
```

`Extractor` also offers `scan_reader`, `scan_reader_ast` (looks inside string
literals and simple `+` concatenations), `scan_dir(root, workers)`,
`scan_url(url, endpoints, external)`, `load_rules_file(path)` and
`load_allowlist(path)`. Each finding is a `jsminer.rules.Match` with `source`,
`pattern`, `value` and `severity`.

Other building blocks:

- `jsminer.endpoints.parse_js_endpoints` returns quoted URLs and paths as
  `JSEndpoint(value, is_url)`.
- `jsminer.jsast.extract_values` returns the string values in JavaScript
  source.
- `jsminer.fetch` has `fetch_url`, `extract_script_srcs`,
  `extract_js_imports`, `resolve_url`, `same_scope` and `is_html_content`.
- `jsminer.filewalk.walk_dir` collects supported files under a directory,
  archive members included.

Custom rules implement `match_name()` and `find(data)` and are made available
to every `Extractor` created afterwards with `jsminer.rules.register_rule`. A
ready-made high-entropy string rule lives in `jsminer.entropy`; call
`jsminer.entropy.register()` to enable it.

## What it does not do

Pages are scanned as the server sends them. jsminer does not run a browser,
so scripts that a page inserts at run time are not found; the `-render` flag
is accepted only so that existing command lines keep working. Plugins are
limited to the rules shipped with the package; no external plugin files are
loaded.