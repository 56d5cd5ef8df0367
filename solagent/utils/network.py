from solana.rpc.async_api import AsyncClient

from solagent.errors import SolAgentError


async def get_tps(client: AsyncClient) -> float:
    """Transactions per second over the most recent performance sample."""
    try:
        resp = await client.get_recent_performance_samples(1)
    except Exception as e:
        raise SolAgentError(f"Failed to fetch performance samples: {e}", cause=e) from e
    if not resp.value:
        raise SolAgentError("No performance samples available.")
    sample = resp.value[0]
    if not sample.sample_period_secs:
        raise SolAgentError("Performance sample has an empty period.")
    return sample.num_transactions / sample.sample_period_secs
