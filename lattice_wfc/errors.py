# -*- coding: utf-8 -*-
"""Error kinds raised by the synthesis pipeline and its codecs."""


class WFCError(Exception):
    exit_code = 1


class InvalidConfiguration(WFCError):
    exit_code = 1


class UnsupportedFormat(WFCError):
    exit_code = 2


class SynthesisContradiction(WFCError):
    exit_code = 3

    def __init__(self, msg: str, attempts: int = 0):
        super().__init__(msg)
        self.attempts = attempts


class Cancelled(WFCError):
    exit_code = 130
