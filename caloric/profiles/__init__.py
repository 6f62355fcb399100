# -*- coding: utf-8 -*-
"""Profiles: body metrics and the calorie targets derived from them."""
