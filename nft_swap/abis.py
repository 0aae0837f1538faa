# Minimal ABIs, only the functions the swap needs

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]

# ERC721 and ERC1155 share the operator approval interface
NFT_OPERATOR_ABI = [
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_operator", "type": "address"},
        ],
        "name": "isApprovedForAll",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_operator", "type": "address"},
            {"name": "_approved", "type": "bool"},
        ],
        "name": "setApprovalForAll",
        "outputs": [],
        "type": "function",
    },
]


def _order_components(nft_kind: str) -> list:
    prefix = nft_kind.lower()
    components = [
        {"name": "direction", "type": "uint8"},
        {"name": "maker", "type": "address"},
        {"name": "taker", "type": "address"},
        {"name": "expiry", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "erc20Token", "type": "address"},
        {"name": "erc20TokenAmount", "type": "uint256"},
        {
            "name": "fees",
            "type": "tuple[]",
            "components": [
                {"name": "recipient", "type": "address"},
                {"name": "amount", "type": "uint256"},
                {"name": "feeData", "type": "bytes"},
            ],
        },
        {"name": f"{prefix}Token", "type": "address"},
        {"name": f"{prefix}TokenId", "type": "uint256"},
        {
            "name": f"{prefix}TokenProperties",
            "type": "tuple[]",
            "components": [
                {"name": "propertyValidator", "type": "address"},
                {"name": "propertyData", "type": "bytes"},
            ],
        },
    ]
    if nft_kind == "ERC1155":
        components.append({"name": "erc1155TokenAmount", "type": "uint128"})
    return components


def _order_input(name: str, nft_kind: str) -> dict:
    return {"name": name, "type": "tuple", "components": _order_components(nft_kind)}


_SIGNATURE_INPUT = {
    "name": "signature",
    "type": "tuple",
    "components": [
        {"name": "signatureType", "type": "uint8"},
        {"name": "v", "type": "uint8"},
        {"name": "r", "type": "bytes32"},
        {"name": "s", "type": "bytes32"},
    ],
}


def _function(name: str, inputs: list, outputs: list = None, mutability: str = "nonpayable") -> dict:
    return {
        "name": name,
        "type": "function",
        "inputs": inputs,
        "outputs": outputs or [],
        "stateMutability": mutability,
    }


EXCHANGE_PROXY_ABI = [
    _function("buyERC721", [
        _order_input("sellOrder", "ERC721"),
        _SIGNATURE_INPUT,
        {"name": "callbackData", "type": "bytes"},
    ], mutability="payable"),
    _function("sellERC721", [
        _order_input("buyOrder", "ERC721"),
        _SIGNATURE_INPUT,
        {"name": "erc721TokenId", "type": "uint256"},
        {"name": "unwrapNativeToken", "type": "bool"},
        {"name": "callbackData", "type": "bytes"},
    ]),
    _function("buyERC1155", [
        _order_input("sellOrder", "ERC1155"),
        _SIGNATURE_INPUT,
        {"name": "erc1155BuyAmount", "type": "uint128"},
        {"name": "callbackData", "type": "bytes"},
    ], mutability="payable"),
    _function("sellERC1155", [
        _order_input("buyOrder", "ERC1155"),
        _SIGNATURE_INPUT,
        {"name": "erc1155TokenId", "type": "uint256"},
        {"name": "erc1155SellAmount", "type": "uint128"},
        {"name": "unwrapNativeToken", "type": "bool"},
        {"name": "callbackData", "type": "bytes"},
    ]),
    _function("cancelERC721Order", [{"name": "orderNonce", "type": "uint256"}]),
    _function("cancelERC1155Order", [{"name": "orderNonce", "type": "uint256"}]),
    _function("getERC721OrderStatus", [_order_input("order", "ERC721")],
              outputs=[{"name": "status", "type": "uint8"}], mutability="view"),
    _function("getERC1155OrderInfo", [_order_input("order", "ERC1155")],
              outputs=[{
                  "name": "orderInfo",
                  "type": "tuple",
                  "components": [
                      {"name": "orderHash", "type": "bytes32"},
                      {"name": "status", "type": "uint8"},
                      {"name": "orderAmount", "type": "uint128"},
                      {"name": "remainingAmount", "type": "uint128"},
                  ],
              }], mutability="view"),
]
