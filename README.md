# canarykit

Building blocks for synthetic health checks ("canaries"). Each module does one
job and returns plain Python values, so it can be called from any scheduler or
monitoring loop you already have.

## Installation

```
pip install canarykit
```

## Modules

### `canarykit.paths`

- `parse_s3_path("s3://bucket/some/path")` and `parse_gcs_path("gcs://bucket/path")`
  return `(bucket, path)`; a location without a path gives `""` as the path.
- `extract_server_details(r"\\server\share\dir\sub")` returns
  `(server, share, search_path)` with backslashes in the path turned into `/`
  (`"."` when no path is given). It raises `ValueError` for an empty path or
  one that names no share.

### `canarykit.folder`

- `scan_folder(path, recursive=False)` lists the entries of a local folder
  into a `FolderStats`. Subdirectories are counted as entries only when
  `recursive` is set; the scan does not descend into them. A missing folder
  gives empty statistics; an empty folder reports the folder itself as oldest
  and newest, with sizes set to `SIZE_NOT_SUPPORTED`.
- `FolderStats` tracks `oldest`, `newest`, `smallest`, `largest` and the list of
  `files` (each a `File`). `append(file)` adds an entry; `test(folder_test)`
  returns a message describing the first failed expectation, or `None`.
- `FolderTest` holds optional limits: `min_count`, `max_count`, `min_age`,
  `max_age`, `min_size`, `max_size`, `available_size`, `total_size`.
- `file_info(path)` describes one file or directory.
- `parse_duration("1h30m")` returns a `timedelta` (units `ns`, `us`, `ms`, `s`,
  `m`, `h`, `d`, `w`, `y`); `parse_size("10Mi")` returns bytes using binary
  multiples. Both raise `ValueError` on bad input.

### `canarykit.junit`

- `parse_junit(xml)` reads a JUnit XML report into a list of `JunitTestSuite`,
  each with its `JunitTest` cases (status a `JunitStatus`) and `Totals`.
- `JunitTestSuites().ingest(xml)` adds every suite of a report and keeps
  overall totals; `failure_messages()` lists the names of up to ten failed
  tests. `str(totals)` gives a summary such as `"3 passed, 1 failed"`.

### `canarykit.jmeter`

- `check_logs(data)` sums the `elapsed` column of a JMeter CSV results log.
  It raises `JMeterFailure` (carrying `message` and `elapsed`) when any sample
  failed, and `ValueError` when the log cannot be read.
- `properties_args(props)` and `system_properties_args(props)` render `-J` and
  `-D` arguments.

### `canarykit.dns`

- `run_dns_check(DNSCheck(...))` performs an `A`, `CNAME`, `SRV`, `MX`, `PTR`,
  `TXT` or `NS` lookup (optionally against a given `server` and `port`) within
  the check's timeout, and returns a `DNSResult` with `passed`, `message` and
  `duration_ms`. It never raises.
- `lookup(check)` does the same without the timeout wrapper and raises on
  failure; `check_result(records, check)` compares records with `min_records`
  and `exact_reply`; `srv_info("_sip._tcp.example.com")` splits an SRV name.

### `canarykit.metrics`

- `MetricsRegistry` keeps counters, gauges and histograms in memory.
  `export(Metric(name, MetricType.GAUGE, value, labels))` records a sample
  (counters ignore values that are not positive); `value(name, labels)` reads a
  series back. `label_names` and `label_string` help with labels.

### Kubernetes helpers

- `canarykit.kubernetes`: `filter_resources(resources, glob)` drops resources
  whose name matches an ignore glob; `resolve_namespaces(name, label_selector,
  field_selector)` says which namespaces to search, or `None` when they must be
  listed from the cluster; `health_failures(resource, ResourceHealth(...),
  require_healthy, require_ready)` returns failure messages.
- `canarykit.resources`: `resource_label_key`, `label_selector`,
  `apply_check_labels` and `validate_resource_count`, plus the `WaitFor` and
  `CheckRetries` settings with their defaults.
- `canarykit.pods`: `next_node` for round-robin node choice, `condition_diff`
  for timings between pod conditions, `pod_check_selector` and
  `pod_check_selector_value`, `pod_fail_message`, `should_retry_status` and
  `HttpTimeouts`.
- `canarykit.junit_pod`: `junit_check_label`, `wrap_command` (makes a
  container's command always finish and record its exit code),
  `truncate_logs` and `summarize_suites`.

## Example

```python
from canarykit.folder import FolderTest, scan_folder

stats = scan_folder("/var/backups")
problem = stats.test(FolderTest(min_count=1, max_age="25h"))
if problem:
    print("backup check failed:", problem)
```

```python
from canarykit.dns import DNSCheck, run_dns_check

result = run_dns_check(DNSCheck(query="example.com", query_type="A", min_records=1))
print(result.passed, result.message)
```

## What the package does not do

- There is no command-line tool, daemon or scheduler; you call the functions
  yourself.
- It does not talk to a Kubernetes cluster. The Kubernetes modules work on
  plain dictionaries and values you fetch with your own client.
- It does not read from S3, GCS, SMB or SFTP; `canarykit.paths` only parses
  such locations, and `scan_folder` works on local folders.
- It does not run JMeter or JUnit tests; it reads their results.
- Metrics stay in memory; nothing is exposed over HTTP.

## Running the tests

```
pip install canarykit[test]
pytest
```