import pytest

from fuzzysent import Tweet, preprocess, clean_tweet, tokenize, stem_tokens, has_negation, load_stopwords, \
    read_tweets, FormatError


def test_clean_tweet():
    """ links and mentions are dropped, case is folded """

    text = clean_tweet("Check http://t.co/xyz @Bob this is NOT bad")

    assert 'http' not in text
    assert '@' not in text and 'bob' not in text
    assert text.split() == ['check', 'this', 'is', 'not', 'bad']

    # a link at the very end of a tweet
    assert clean_tweet("see https://example.com/a?b=1").split() == ['see']


def test_has_negation():
    assert has_negation("this is not good")
    assert not has_negation("not good")
    assert not has_negation("nothing to see")


def test_tokenize():

    assert tokenize("i'm 100% happy!!") == ['im', 'happy']
    assert tokenize("the cat and the dog", stopwords={'the', 'and'}) == ['cat', 'dog']
    assert tokenize("") == []


def test_stem_tokens():
    assert stem_tokens(['running', 'cats', 'happy']) == ['run', 'cat', 'happi']
    assert stem_tokens([]) == []


def test_preprocess():

    tweet = preprocess("@user I am NOT loving the 2 rainy days http://t.co/abc", stopwords={'i', 'am', 'the'})

    assert isinstance(tweet, Tweet)
    assert tweet.negation
    assert tweet.tokens == ['not', 'loving', 'rainy', 'days']
    assert tweet.stems == ['not', 'love', 'raini', 'dai']


def test_load_stopwords(tmp_path):

    path = tmp_path / "stopwords.txt"
    path.write_text("the\n  a \n\nand\n", encoding='utf-8')

    assert load_stopwords(path) == {'the', 'a', 'and'}


def test_read_tweets(tmp_path):

    path = tmp_path / "tweets.csv"
    path.write_text(
        '"0","1467810369","Mon Apr 06 22:19:45 PDT 2009","NO_QUERY","user_a","is upset, can\'t update"\n'
        '\n'
        '"4","1467822272","Mon Apr 06 22:22:45 PDT 2009","NO_QUERY","user_b","I love @user_c"\n',
        encoding='utf-8')

    assert list(read_tweets(path)) == ["is upset, can't update", "I love @user_c"]
    assert list(read_tweets(path, column=4)) == ['user_a', 'user_b']


def test_read_tweets_short_row(tmp_path):

    path = tmp_path / "tweets.csv"
    path.write_text(
        '"0","1","date","NO_QUERY","user_a","fine"\n'
        '"0","2","date"\n',
        encoding='utf-8')

    tweets = read_tweets(path)
    assert next(tweets) == 'fine'

    with pytest.raises(FormatError, match='line 2') as excinfo:
        next(tweets)
    assert excinfo.value.line_number == 2
