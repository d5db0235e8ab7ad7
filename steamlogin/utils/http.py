import logging

import requests

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10

DEFAULT_HEADERS = {
    'Accept-language': 'en',
}


def http_get(url, params=None, verify_ssl=True, timeout=DEFAULT_TIMEOUT_SECONDS) -> requests.Response:
    '''blocking GET, raises requests.RequestException on transport errors and non 2xx responses'''
    log.debug(f'GET {url}')
    r = requests.get(url, params=params, headers=DEFAULT_HEADERS, verify=verify_ssl, timeout=timeout)
    r.raise_for_status()
    return r


def http_post_form(url, data, verify_ssl=True, timeout=DEFAULT_TIMEOUT_SECONDS) -> requests.Response:
    '''blocking form-urlencoded POST, raises requests.RequestException on transport errors'''
    log.debug(f'POST {url}')
    return requests.post(url, data=data, headers=DEFAULT_HEADERS, verify=verify_ssl, timeout=timeout)
