from pybencode.utils.lookahead import LookaheadBuffer
