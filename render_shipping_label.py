#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render a shipping label PDF from a JSON payload.
"""

# local repo modules
import shipping_label_printer.cli


if __name__ == "__main__":
	shipping_label_printer.cli.main()
