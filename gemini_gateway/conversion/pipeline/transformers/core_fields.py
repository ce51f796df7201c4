"""Core fields transformer.

Copies model, messages and passthrough parameters into the upstream body.
"""

import dataclasses

from gemini_gateway.conversion.pipeline.base import ConversionContext, RequestTransformer


class CoreFieldsTransformer(RequestTransformer):
    """Seeds the upstream body from the client request.

    - model: the resolved upstream model, never the "-search" id
    - messages: forwarded unchanged
    - any undeclared OpenAI parameter (temperature, max_tokens, ...) as-is
    - stream: set to true only for streaming calls
    """

    def transform(self, context: ConversionContext) -> ConversionContext:
        request = context.chat_request

        new_request = {
            **context.upstream_request,
            **request.passthrough_fields,
            "model": context.variant.upstream_model,
            "messages": request.messages,
        }
        if context.streaming:
            new_request["stream"] = True

        return dataclasses.replace(context, upstream_request=new_request)
