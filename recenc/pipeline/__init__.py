"""
This package contains the encoding pipelines for recenc.

A pipeline orchestrates one run mode: batch mode encodes a list of recordings
with derived output names and tallies the outcome, single-file mode encodes one
recording to an explicit output. Both hand each file to an Encoder one at a
time and wait for it to finish before moving on.
"""
