"""
Sheet-music processing stages.

part_split - find instrument part boundaries in a multi-part PDF and
             validate the cutting instructions for the splitter
"""
