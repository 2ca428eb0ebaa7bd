"""Writes benchmark contexts and runs as a JSON document."""

from __future__ import annotations

import math
import sys
from datetime import datetime
from typing import Mapping, Sequence, TextIO

from benchjson.model import (
    Context,
    MemoryResult,
    Run,
    RunType,
    Skipped,
    StatisticUnit,
)

_ESCAPES = {
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\\": "\\\\",
    '"': '\\"',
}


def str_escape(s: str) -> str:
    """Escape the characters that may not appear raw in a JSON string."""
    return "".join(_ESCAPES.get(c, c) for c in s)


def _format_double(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Infinity" if value < 0 else "Infinity"
    return f"{value:.16e}"


def format_kv(key: str, value: str | bool | int | float) -> str:
    """Format one ``"key": value`` pair."""
    name = str_escape(key)
    if isinstance(value, bool):
        return f'"{name}": {"true" if value else "false"}'
    if isinstance(value, int):
        return f'"{name}": {value}'
    if isinstance(value, float):
        return f'"{name}": {_format_double(value)}'
    if isinstance(value, str):
        return f'"{name}": "{str_escape(value)}"'
    raise TypeError(f"cannot format value of type {type(value).__name__}")


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _local_date_time() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


class JSONReporter:
    """Streams a benchmark report as JSON to a text stream."""

    def __init__(
        self,
        out: TextIO | None = None,
        build_type: str = "release",
        global_context: Mapping[str, str] | None = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.build_type = build_type
        self.global_context = dict(global_context or {})
        self._first_report = True

    def report_context(self, context: Context) -> bool:
        """Open the document and write the context block."""
        indent = " " * 4
        info = context.cpu_info
        parts = ["{\n", '  "context": {\n']

        entries = [
            format_kv("date", context.date or _local_date_time()),
            format_kv("host_name", context.host_name),
        ]
        if context.executable_name:
            entries.append(format_kv("executable", context.executable_name))
        entries.append(format_kv("num_cpus", int(info.num_cpus)))
        entries.append(
            format_kv("mhz_per_cpu", _round_half_away(info.cycles_per_second / 1000000.0))
        )
        if info.scaling is not None:
            entries.append(format_kv("cpu_scaling_enabled", bool(info.scaling)))
        parts.extend(f"{indent}{entry},\n" for entry in entries)

        parts.append(f'{indent}"caches": [\n')
        cache_blocks = []
        for cache in info.caches:
            fields = [
                format_kv("type", cache.type),
                format_kv("level", int(cache.level)),
                format_kv("size", int(cache.size)),
                format_kv("num_sharing", int(cache.num_sharing)),
            ]
            body = ",\n".join(" " * 8 + f for f in fields)
            cache_blocks.append(f"      {{\n{body}\n      }}")
        if cache_blocks:
            parts.append(",\n".join(cache_blocks) + "\n")
        parts.append(f"{indent}],\n")

        load = ",".join(f"{v:g}" for v in info.load_avg)
        parts.append(f'{indent}"load_avg": [{load}],\n')

        tail = [format_kv("library_build_type", self.build_type)]
        tail.extend(format_kv(k, v) for k, v in sorted(self.global_context.items()))
        parts.append(",\n".join(indent + entry for entry in tail))
        parts.append("\n")

        parts.append("  },\n")
        parts.append('  "benchmarks": [\n')
        self.out.write("".join(parts))
        return True

    def report_runs(self, runs: Sequence[Run]) -> None:
        """Write a batch of runs into the benchmarks list."""
        if not runs:
            return
        if not self._first_report:
            self.out.write(",\n")
        self._first_report = False
        for position, run in enumerate(runs):
            if position:
                self.out.write(",\n")
            self.out.write("    {\n")
            self.print_run_data(run)
            self.out.write("    }")

    def finalize(self) -> None:
        """Close the benchmarks list and the document."""
        self.out.write("\n  ]\n}\n")

    def print_run_data(self, run: Run) -> None:
        """Write the fields of one run."""
        aggregate = run.run_type is RunType.AGGREGATE
        fields = [
            format_kv("name", run.benchmark_name()),
            format_kv("family_index", run.family_index),
            format_kv("per_family_instance_index", run.per_family_instance_index),
            format_kv("run_name", run.run_name),
            format_kv("run_type", run.run_type.value),
            format_kv("repetitions", run.repetitions),
        ]
        if not aggregate:
            fields.append(format_kv("repetition_index", run.repetition_index))
        fields.append(format_kv("threads", run.threads))
        if aggregate:
            fields.append(format_kv("aggregate_name", run.aggregate_name))
            fields.append(format_kv("aggregate_unit", run.aggregate_unit.value))

        if run.skipped is Skipped.WITH_ERROR:
            fields.append(format_kv("error_occurred", True))
            fields.append(format_kv("error_message", run.skip_message))
        elif run.skipped is Skipped.WITH_MESSAGE:
            fields.append(format_kv("skipped", True))
            fields.append(format_kv("skip_message", run.skip_message))

        if not run.report_big_o and not run.report_rms:
            fields.append(format_kv("iterations", run.iterations))
            if not aggregate or run.aggregate_unit is StatisticUnit.TIME:
                fields.append(format_kv("real_time", float(run.adjusted_real_time)))
                fields.append(format_kv("cpu_time", float(run.adjusted_cpu_time)))
            else:
                fields.append(format_kv("real_time", float(run.real_accumulated_time)))
                fields.append(format_kv("cpu_time", float(run.cpu_accumulated_time)))
            fields.append(format_kv("time_unit", run.time_unit.value))
        elif run.report_big_o:
            fields.append(format_kv("cpu_coefficient", float(run.adjusted_cpu_time)))
            fields.append(format_kv("real_coefficient", float(run.adjusted_real_time)))
            fields.append(format_kv("big_o", run.big_o))
            fields.append(format_kv("time_unit", run.time_unit.value))
        else:
            fields.append(format_kv("rms", float(run.adjusted_cpu_time)))

        fields.extend(format_kv(k, float(v)) for k, v in sorted(run.counters.items()))

        memory = run.memory_result
        if memory is not None:
            fields.append(format_kv("allocs_per_iter", float(run.allocs_per_iter)))
            fields.append(format_kv("max_bytes_used", memory.max_bytes_used))
            for label, value in (
                ("total_allocated_bytes", memory.total_allocated_bytes),
                ("net_heap_growth", memory.net_heap_growth),
            ):
                if value != MemoryResult.TOMBSTONE:
                    fields.append(format_kv(label, value))

        if run.report_label:
            fields.append(format_kv("label", run.report_label))

        indent = " " * 6
        self.out.write(",\n".join(indent + f for f in fields) + "\n")