#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lay out QR code or barcode labels from row tables onto printable sheets.
"""

# local repo modules
import qr_label_sheets.cli


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	qr_label_sheets.cli.main()


if __name__ == "__main__":
	main()
