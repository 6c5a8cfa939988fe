"""Output sinks for generated declarations."""

from dimob_gen.sinks.console import ConsoleSink
from dimob_gen.sinks.json_report import JsonReportSink
from dimob_gen.sinks.text_file import TextFileSink

__all__ = ["ConsoleSink", "JsonReportSink", "TextFileSink"]
