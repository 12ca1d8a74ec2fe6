"""同時実行数を制限したタスク投入"""
from concurrent.futures import ThreadPoolExecutor, Future, wait
from typing import Callable, Iterable, List, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def pool_size(limit: int, item_count: int) -> int:
    """スレッドプールのワーカー数を決める

    limitが正ならlimit、0以下なら全件を同時に投入する。
    無制限の場合はアイテム1件につきOSスレッドを1つ使うため、
    数千件規模のマニフェストではmax_operationsを指定すること。
    """
    if limit > 0:
        return limit
    return max(item_count, 1)


def run_bounded(func: Callable[[T], R], items: Iterable[T], limit: int) -> List[Tuple[T, Future]]:
    """itemsごとにfuncを実行し、全件が完了するまで待つ

    同時に実行されるのは最大limit件（0以下なら無制限）。
    1件の失敗は他のタスクに影響せず、例外はFutureに保持される。

    Returns:
        投入順の (item, Future) のリスト
    """
    items = list(items)
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=pool_size(limit, len(items))) as pool:
        submitted = [(item, pool.submit(func, item)) for item in items]
        wait([future for _, future in submitted])

    return submitted
