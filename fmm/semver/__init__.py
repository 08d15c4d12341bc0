# fmm/semver/__init__.py
