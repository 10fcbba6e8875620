"""easyp.yaml reference text, served via the REST API and MCP reference endpoints."""

from __future__ import annotations

EASYP_REFERENCE = """\
# easyp.yaml Reference

`easyp.yaml` configures the easyp protobuf toolchain. A config has five top-level keys:
`version`, `lint`, `deps`, `generate` and `breaking`.

## 1. version

```yaml
version: v1alpha                  # config format version
```

## 2. lint: linter rules

```yaml
lint:
  use:                            # rule groups or individual rules
    - DEFAULT
  enum_zero_value_suffix: UNSPECIFIED
  service_suffix: API
  ignore:                         # paths excluded from linting
    - vendor/
  except:                         # rules disabled everywhere
    - COMMENT_FIELD
  allow_comment_ignores: false    # honour `// buf:lint:ignore` comments
  ignore_only:                    # rule -> paths it is disabled for
    PACKAGE_VERSION_SUFFIX:
      - proto/legacy
```

## 3. deps: remote dependencies

```yaml
deps:
  - github.com/googleapis/googleapis
  - github.com/grpc-ecosystem/grpc-gateway@v2.19.1
```

## 4. generate: code generation

```yaml
generate:
  inputs:                         # one of `directory` or `git_repo` per item
    - directory:
        path: proto
        root: "."
    - git_repo:
        url: https://github.com/org/repo.git
        sub_directory: proto
        root: ""
  plugins:                        # each item starts with name, remote, path or command
    - name: go
      out: gen/go
      opts:
        paths: source_relative
    - remote: api.easyp.tech/community/neoeinstein-prost:v0.3.1
      out: gen/rust
    - path: ./bin/protoc-gen-custom
      out: gen/custom
    - command:
        - go
        - run
        - ./cmd/protoc-gen-x
      out: gen/x
      with_imports: true
  managed:                        # managed mode rewrites file/field options
    enabled: true
    disable:
      - module: buf.build/googleapis/googleapis
    override:
      - file_option: go_package_prefix
        value: github.com/org/repo/gen/go
```

## 5. breaking: breaking change detection

```yaml
breaking:
  ignore:
    - proto/experimental
  against_git_ref: main           # git ref to compare against
```

## Completion templates

When completing values the assistant offers placeholders that expand into scaffolding:

| Placeholder | Inserted as |
|-------------|-------------|
| `<map>`     | a new indented line for nested keys |
| `<array>`   | a new indented `- ` item line |
| `<string>`  | `""` with the caret between the quotes |
| `<url>`     | `"https://github.com/org/repo.git"` |
"""
