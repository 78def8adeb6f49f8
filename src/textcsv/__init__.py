"""Text / CSV / TSV classification and streaming XHTML emission.

Submodules:
  patterns    -- metadata keys, media-type constants, markup names
  errors      -- exception hierarchy
  config      -- TextAndCSVConfig pydantic model and environment loader
  media_type  -- "type/subtype; k=v" parsing and formatting
  schema      -- ClassificationParams, SniffResult, DelimiterCandidateScore
  source      -- MarkableReader (bounded mark/reset over a text stream)
  encoding    -- charset detection (chardet) and byte-stream decoding
  override    -- caller-forced classification
  sniffer     -- delimiter sniffing over a bounded prefix
  sax         -- scoped XHTML events over a SAX content handler
  emitter     -- streaming table / text emission with the encapsulation fallback
  annotator   -- final content type and delimiter label
  pipeline    -- TextAndCSVParser.parse() entry point
  cli         -- command-line front end
"""
