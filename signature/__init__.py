"""
Core Signature module.

Maps pointer positions between screen space and PDF space, and embeds
signature images into PDF pages with an explicit affine placement matrix
(position, size and rotation about the field centre).
"""
