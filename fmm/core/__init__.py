# fmm/core/__init__.py
