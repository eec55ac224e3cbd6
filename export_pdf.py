#!/usr/bin/env python3
"""
Scheduled PDF export for a Qlik Cloud visualization.

Thin entry script; the application lives in the qcs_export_pdf package.
"""

import sys
from qcs_export_pdf.libs.main_app import main


if __name__ == "__main__":
    sys.exit(main())
