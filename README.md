# benchjson

`benchjson` writes benchmark results as a JSON document. The document is
streamed to any text stream. It holds a `context` block that describes the
machine, followed by a `benchmarks` list with one object for each run.

## Installation

```
pip install benchjson
```

## Usage

Describe the machine with `Context`, `CPUInfo` and `CacheInfo` from
`benchjson.model`. Describe each result with `Run`. Then hand them to
`JSONReporter` from `benchjson.json_reporter`:

```python
import sys

from benchjson.model import CacheInfo, CPUInfo, Context, Run, TimeUnit
from benchjson.json_reporter import JSONReporter

context = Context(
    host_name="build-box",
    cpu_info=CPUInfo(
        num_cpus=8,
        cycles_per_second=3.2e9,
        caches=[CacheInfo(type="Data", level=1, size=32768, num_sharing=2)],
        load_avg=[0.5, 0.4, 0.3],
    ),
)

reporter = JSONReporter(sys.stdout, build_type="release", global_context={})
reporter.report_context(context)
reporter.report_runs([
    Run(
        run_name="BM_basic",
        iterations=1000,
        real_accumulated_time=1.5e-4,
        cpu_accumulated_time=1.4e-4,
        time_unit=TimeUnit.NANOSECOND,
    ),
])
reporter.finalize()
```

`JSONReporter(out=None, build_type="release", global_context=None)` writes to
`sys.stdout` when no stream is given. Its methods do the following:

- `report_context(context)` opens the document and writes the context block.
- `report_runs(runs)` appends a batch of runs. An empty batch writes nothing.
- `finalize()` closes the document.
- `print_run_data(run)` writes the fields of a single run.

### The context block

- `date` is `Context.date`. When that is not set, the current local time in
  ISO 8601 form is used.
- `mhz_per_cpu` is `cycles_per_second / 1e6`, rounded half away from zero.
- `cpu_scaling_enabled` is written only when `CPUInfo.scaling` is not `None`.
- `executable` is written only when `Context.executable_name` is set.
- `global_context` entries come after `library_build_type`, sorted by key.

### Run objects

- `real_time` and `cpu_time` are given per iteration in the run's `TimeUnit`.
  They are also available as `Run.adjusted_real_time` and
  `Run.adjusted_cpu_time`. For aggregates whose unit is
  `StatisticUnit.PERCENTAGE`, the accumulated values are written as they are.
- An aggregate run (`RunType.AGGREGATE`) is named
  `<run_name>_<aggregate_name>` (see `Run.benchmark_name()`). It gets
  `aggregate_name` and `aggregate_unit` fields in place of
  `repetition_index`.
- The `Skipped` value decides the extra fields. `WITH_ERROR` adds
  `error_occurred` and `error_message`. `WITH_MESSAGE` adds `skipped` and
  `skip_message`.
- When `report_big_o` is set, the run is written as a complexity row with
  `cpu_coefficient`, `real_coefficient`, `big_o` and `time_unit`. When
  `report_rms` is set, it is written as an `rms` row.
- Counters are written as doubles, sorted by name.
- A `MemoryResult` adds `allocs_per_iter` and `max_bytes_used`. It also adds
  `total_allocated_bytes` and `net_heap_growth` unless they equal
  `MemoryResult.TOMBSTONE`.
- A non-empty `report_label` is written as `label`.

### Value formatting

- Doubles are written in scientific notation with 16 fractional digits.
- NaN is written as `NaN`. Infinities are written as `Infinity` or
  `-Infinity`.
- Keys and strings escape `\b`, `\f`, `\n`, `\r`, `\t`, `\\` and `"`.

Single fields can be formatted with `str_escape(s)` and
`format_kv(key, value)`. `format_kv` accepts `str`, `bool`, `int` and
`float`. It raises `TypeError` for any other type.

## What it does not do

`benchjson` only formats results. It does not run or time benchmarks, and it
does not compute aggregates or complexity fits. It does not detect CPU,
cache or load information either. You have to supply all of these values
yourself.

## Running the tests

```
pip install benchjson[test]
pytest
```