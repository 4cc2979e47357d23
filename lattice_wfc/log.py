# -*- coding: utf-8 -*-
# Tagged console output shared by the CLI and the engine's debug traces.

import sys


def dbg(enabled: bool, *a):
    if enabled: print("[dbg]", *a, flush=True)

def info(*a):
    print("[INFO]", *a, flush=True)

def ok(*a):
    print("[OK]", *a, flush=True)

def hb(*a):
    print("[hb]", *a, flush=True)

def warn(*a):
    print("[WARN]", *a, file=sys.stderr, flush=True)

def err(*a):
    print("[ERROR]", *a, file=sys.stderr, flush=True)
