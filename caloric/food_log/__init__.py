# -*- coding: utf-8 -*-
"""Food log: per-user entries and progress against the calorie target."""
