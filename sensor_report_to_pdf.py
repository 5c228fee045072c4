#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render sensor test results JSON into a paginated PDF report.
"""

import paginated_report.cli


if __name__ == "__main__":
	paginated_report.cli.main()
